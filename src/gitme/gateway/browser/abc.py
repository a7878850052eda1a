"""Browser launcher abstraction for testability.

Opening a pull request in the browser is a side action of the dashboard; the
core only hands over the URL.
"""

from abc import ABC, abstractmethod


class BrowserLauncher(ABC):
    """Abstract interface for launching URLs in a browser."""

    @abstractmethod
    def launch(self, url: str) -> None:
        """Launch a URL in the default web browser.

        Args:
            url: The URL to open in the browser
        """
        ...
