"""Status bar widget for TUI dashboard."""

from rich.text import Text
from textual.widgets import Static

from gitme.tui.dashboard import BucketFrame
from gitme.tui.sorting.types import SortState


class StatusBar(Static):
    """Bottom bar with refresh state, counts, errors and transient messages.

    Renders e.g.: 12 PRs · by recent activity · updated 14:30:05 (0.8s) · next refresh in 25s
    """

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: $surface;
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._frame: BucketFrame | None = None
        self._last_update: str | None = None
        self._duration: float | None = None
        self._countdown: int | None = None
        self._message: str | None = None

    def on_mount(self) -> None:
        self._refresh_display()

    def set_frame(self, frame: BucketFrame) -> None:
        """Show counts, sort order and errors of the active bucket."""
        self._frame = frame
        self._refresh_display()

    def set_last_update(self, time_str: str, duration: float | None = None) -> None:
        """Record when the last refresh cycle completed.

        Args:
            time_str: Formatted wall clock time of the update
            duration: Seconds the cycle took
        """
        self._last_update = time_str
        self._duration = duration
        self._refresh_display()

    def set_refresh_countdown(self, seconds: int | None) -> None:
        """Seconds until the next timed refresh, None when disabled or refreshing."""
        self._countdown = seconds
        self._refresh_display()

    def set_message(self, message: str | None) -> None:
        """Show a message until the next one replaces it (None clears)."""
        self._message = message
        self._refresh_display()

    @property
    def message(self) -> str | None:
        return self._message

    def _refresh_display(self) -> None:
        text = Text()
        frame = self._frame

        if frame is not None:
            count = frame.pull_request_count
            text.append(f"{count} PR{'s' if count != 1 else ''}")
            text.append(f" · {SortState(key=frame.sort_key).display_label}")
            if frame.search_query:
                text.append(f" · search: {frame.search_query}", style="bold")

        if self._last_update is not None:
            update = f" · updated {self._last_update}"
            if self._duration is not None:
                update += f" ({self._duration:.1f}s)"
            text.append(update)

        if frame is not None and frame.refreshing:
            text.append(" · refreshing…", style="italic")
        elif self._countdown is not None:
            text.append(f" · next refresh in {self._countdown}s")

        if frame is not None:
            if frame.auth_error is not None:
                text.append(f" · {frame.auth_error.message}", style="bold red")
            elif frame.stale_repositories:
                stale = len(frame.stale_repositories)
                text.append(f" · {stale} stale", style="yellow")

        if self._message:
            text.append(f" · {self._message}", style="bold")

        self.update(text)
