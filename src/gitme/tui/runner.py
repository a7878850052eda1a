"""TUI runner abstraction for testability.

This module provides an ABC for running Textual TUI applications, enabling
CLI routing tests without starting the Textual event loop.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitme.tui.app import GitmeDashApp


class TuiRunner(ABC):
    """Abstract interface for running TUI applications."""

    @abstractmethod
    def run(self, app: GitmeDashApp) -> None:
        """Run the TUI application.

        Args:
            app: The GitmeDashApp instance to run
        """
        ...


class RealTuiRunner(TuiRunner):
    """Production implementation that runs the Textual event loop."""

    def run(self, app: GitmeDashApp) -> None:
        app.run()


class FakeTuiRunner(TuiRunner):
    """Test implementation that captures apps without running the event loop.

    CLI routing tests use it to verify that the correct app was created with
    correct parameters.
    """

    def __init__(self) -> None:
        self._apps_run: list[GitmeDashApp] = []

    def run(self, app: GitmeDashApp) -> None:
        """Capture app without running event loop."""
        self._apps_run.append(app)

    @property
    def apps_run(self) -> list[GitmeDashApp]:
        """Apps that were passed to run().

        This property is for test assertions only.
        """
        return self._apps_run
