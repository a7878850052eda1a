"""Pull request table widget for TUI dashboard."""

from datetime import datetime

from rich.text import Text
from textual.widgets import DataTable

from gitme.gateway.github.errors import AuthError
from gitme.tui.dashboard import BucketFrame
from gitme.tui.selection.types import HeaderRow, PullRequestRow, Row


class PullRequestTable(DataTable):
    """DataTable subclass displaying one bucket's grouped pull requests.

    The table never owns the selection: the app moves the Bucket's cursor and
    then calls populate() with the resulting frame, so keys always reach the
    app's bindings instead of the table's own cursor actions.
    """

    can_focus = False

    def __init__(self) -> None:
        super().__init__(cursor_type="row", zebra_stripes=False)
        self._rows: tuple[Row, ...] = ()

    def on_mount(self) -> None:
        """Configure columns when widget is mounted."""
        self._setup_columns()

    def _setup_columns(self) -> None:
        if self.columns:
            return
        self.add_column("pr", key="pr")
        self.add_column("title", key="title")
        self.add_column("author", key="author")
        self.add_column("labels", key="labels")
        self.add_column("updated", key="updated")

    @property
    def rows_shown(self) -> tuple[Row, ...]:
        return self._rows

    def populate(self, frame: BucketFrame, now: datetime) -> None:
        """Replace the table content with `frame`'s rows and selection.

        Args:
            frame: Projection of the bucket to show
            now: Current time, for relative update times
        """
        self._setup_columns()
        self._rows = frame.rows
        self.clear()

        for row in frame.rows:
            self.add_row(*_row_to_cells(row, frame.auth_error, now), key=_row_key(row))

        if frame.selected_index is None:
            self.show_cursor = False
        else:
            self.show_cursor = True
            self.move_cursor(row=frame.selected_index)


def _row_key(row: Row) -> str:
    if isinstance(row, HeaderRow):
        return f"repo:{row.repo_id}"
    return f"pr:{row.repo_id}#{row.pull_request.number}"


def _row_to_cells(row: Row, auth_error: AuthError | None, now: datetime) -> tuple[Text, ...]:
    if isinstance(row, HeaderRow):
        return _header_cells(row, auth_error, now)
    return _pull_request_cells(row, now)


def _header_cells(row: HeaderRow, auth_error: AuthError | None, now: datetime) -> tuple[Text, ...]:
    marker = "▼" if row.expanded else "▶"
    count = f"{row.matching}" if row.matching == row.total else f"{row.matching}/{row.total}"
    name = Text(f"{marker} {row.repo_id} ({count})", style="bold")

    status = row.status
    if auth_error is not None:
        note = Text("authentication failed", style="bold red")
    elif status.error is not None:
        note = Text(f"stale: {status.error.describe()}", style="yellow")
    elif not status.loaded:
        note = Text("loading…", style="dim italic")
    else:
        note = Text("")

    updated = format_age(status.last_updated, now) if status.last_updated else ""
    return (name, note, Text(""), Text(""), Text(updated, style="dim"))


def _pull_request_cells(row: PullRequestRow, now: datetime) -> tuple[Text, ...]:
    pr = row.pull_request
    number = Text(f"  #{pr.number}")
    title = Text(pr.title)
    if pr.is_draft:
        number.stylize("dim")
        title = Text.assemble(("[draft] ", "dim"), pr.title)
    labels = Text(", ".join(pr.labels), style="cyan")
    return (
        number,
        title,
        Text(pr.author, style="green"),
        labels,
        Text(format_age(pr.updated_at, now), style="dim"),
    )


def format_age(moment: datetime, now: datetime) -> str:
    """Format `moment` relative to `now`, e.g. "5m ago" or "3d ago"."""
    seconds = int((now - moment).total_seconds())
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"
