"""Context for gitme dash with the dashboard's dependencies.

GitmeDashContext bundles the loaded configuration with the gateways the
dashboard talks to (GitHub, browser, review command, clock, TUI runner).
This enables dependency injection for testing TUI components.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from gitme.core.config import GitmeConfig, default_config_path
from gitme.gateway.browser.abc import BrowserLauncher
from gitme.gateway.browser.fake import FakeBrowserLauncher
from gitme.gateway.browser.real import RealBrowserLauncher
from gitme.gateway.github.abc import PrDataSource
from gitme.gateway.github.auth import resolve_github_token
from gitme.gateway.github.fake import FakePrDataSource
from gitme.gateway.github.real import RealPrDataSource
from gitme.gateway.review_launcher.abc import ReviewLauncher
from gitme.gateway.review_launcher.fake import FakeReviewLauncher
from gitme.gateway.review_launcher.real import RealReviewLauncher
from gitme.gateway.time.abc import Time
from gitme.gateway.time.fake import FakeTime
from gitme.gateway.time.real import RealTime
from gitme.tui.runner import FakeTuiRunner, RealTuiRunner, TuiRunner

DataSourceFactory = Callable[[GitmeConfig], PrDataSource]


def create_real_data_source(config: GitmeConfig) -> PrDataSource:
    """Build the GitHub data source for `config`.

    Raises:
        RuntimeError: If no token is configured and the gh CLI cannot provide one
        ValueError: If the gh CLI returns an empty token
    """
    return RealPrDataSource(
        token=resolve_github_token(config.api_key),
        timeout=config.fetch_timeout or None,
    )


@dataclass(frozen=True)
class GitmeDashContext:
    """Context for gitme dash.

    This design:
    - Enables CLI routing tests without starting Textual (via FakeTuiRunner)
    - Enables TUI behavior tests with Pilot (via for_test() factories)
    - Follows the same ABC/Real/Fake pattern as the gateways
    """

    config: GitmeConfig
    config_path: Path
    data_source: PrDataSource
    browser: BrowserLauncher
    review_launcher: ReviewLauncher
    time: Time
    tui_runner: TuiRunner
    # Rebuilds the data source after the configuration was reloaded
    data_source_factory: DataSourceFactory = field(default=create_real_data_source)

    @classmethod
    def for_production(cls, config: GitmeConfig, config_path: Path) -> "GitmeDashContext":
        """Create production context with real implementations.

        Args:
            config: Loaded configuration
            config_path: File the configuration was loaded from (for reloads)

        Returns:
            GitmeDashContext configured for production use

        Raises:
            RuntimeError: If no GitHub token can be resolved
        """
        return cls(
            config=config,
            config_path=config_path,
            data_source=create_real_data_source(config),
            browser=RealBrowserLauncher(),
            review_launcher=RealReviewLauncher(),
            time=RealTime(),
            tui_runner=RealTuiRunner(),
            data_source_factory=create_real_data_source,
        )

    @classmethod
    def for_test(
        cls,
        config: GitmeConfig,
        *,
        config_path: Path | None = None,
        data_source: PrDataSource | None = None,
        browser: BrowserLauncher | None = None,
        review_launcher: ReviewLauncher | None = None,
        time: Time | None = None,
        tui_runner: TuiRunner | None = None,
    ) -> "GitmeDashContext":
        """Create test context with injectable fakes.

        Reloading the configuration keeps using the same data source.

        Example:
            # For TUI behavior tests with Pilot
            browser = FakeBrowserLauncher()
            dash_ctx = GitmeDashContext.for_test(config, data_source=source, browser=browser)
            app = GitmeDashApp(dash_ctx, refresh_interval=0)
            async with app.run_test() as pilot:
                await pilot.press("o")
            assert browser.launched_urls == ["https://github.com/..."]
        """
        resolved_source = data_source or FakePrDataSource()
        return cls(
            config=config,
            config_path=config_path or default_config_path(),
            data_source=resolved_source,
            browser=browser or FakeBrowserLauncher(),
            review_launcher=review_launcher or FakeReviewLauncher(),
            time=time or FakeTime(),
            tui_runner=tui_runner or FakeTuiRunner(),
            data_source_factory=lambda _config: resolved_source,
        )
