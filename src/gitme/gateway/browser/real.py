"""Real BrowserLauncher implementation using click.launch."""

import click

from gitme.gateway.browser.abc import BrowserLauncher


class RealBrowserLauncher(BrowserLauncher):
    """Production implementation that opens URLs in the system browser."""

    def launch(self, url: str) -> None:
        click.launch(url)
