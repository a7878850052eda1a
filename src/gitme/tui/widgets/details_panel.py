"""Details panel for the selected row."""

from rich.text import Text
from textual.widgets import Static

from gitme.gateway.github.types import PullRequest, RepositoryConfig
from gitme.tui.selection.types import HeaderRow, PullRequestRow, Row

# Lines of the PR description visible at once
BODY_PREVIEW_LINES = 6


class DetailsPanel(Static):
    """Shows the selected pull request or repository below the table.

    The description of a pull request is shown through a window of
    BODY_PREVIEW_LINES lines that scroll_body() moves. The window goes back
    to the top whenever a different row is selected; a refresh of the same
    pull request keeps it.
    """

    DEFAULT_CSS = """
    DetailsPanel {
        height: auto;
        max-height: 14;
        border-top: solid $primary-darken-2;
        padding: 0 1;
    }
    """

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__(id=id)
        self._row: Row | None = None
        self._body_offset = 0

    @property
    def body_offset(self) -> int:
        return self._body_offset

    def show_row(self, row: Row | None) -> None:
        previous_key = None if self._row is None else self._row.key
        if row is None or row.key != previous_key:
            self._body_offset = 0
        self._row = row
        self._refresh_content()

    def scroll_body(self, delta: int) -> bool:
        """Move the description window by `delta` lines.

        Returns:
            True if the window moved
        """
        if not isinstance(self._row, PullRequestRow):
            return False
        limit = max_body_offset(self._row.pull_request)
        offset = min(max(self._body_offset + delta, 0), limit)
        if offset == self._body_offset:
            return False
        self._body_offset = offset
        self._refresh_content()
        return True

    def _refresh_content(self) -> None:
        row = self._row
        if isinstance(row, PullRequestRow):
            self.update(render_pull_request(row.pull_request, body_offset=self._body_offset))
        elif isinstance(row, HeaderRow):
            self.update(render_repository(row.repository, row.total))
        else:
            self.update("")


def _body_lines(pr: PullRequest) -> list[str]:
    return pr.body.strip().splitlines()


def max_body_offset(pr: PullRequest) -> int:
    return max(len(_body_lines(pr)) - BODY_PREVIEW_LINES, 0)


def render_pull_request(pr: PullRequest, *, body_offset: int = 0) -> Text:
    text = Text()
    text.append(f"#{pr.number} {pr.title}\n", style="bold")
    text.append(f"{pr.author}", style="green")
    if pr.base_ref and pr.head_ref:
        text.append(f" wants to merge {pr.head_ref} into {pr.base_ref}")
    text.append(f" · {pr.status.value.lower()}\n", style="dim")

    if pr.reviewers:
        text.append(f"Reviewers: {', '.join(pr.reviewers)}\n")
    if pr.assignees:
        text.append(f"Assignees: {', '.join(pr.assignees)}\n")
    if pr.reviews:
        states = ", ".join(f"{review.author} ({review.state.lower()})" for review in pr.reviews)
        text.append(f"Reviews: {states}\n")

    body_lines = _body_lines(pr)
    if body_lines:
        start = min(max(body_offset, 0), max_body_offset(pr))
        end = start + BODY_PREVIEW_LINES
        text.append("\n")
        if start > 0:
            text.append(f"↑ {start} more lines (ctrl+u)\n", style="dim italic")
        text.append("\n".join(body_lines[start:end]), style="dim")
        if end < len(body_lines):
            text.append(f"\n↓ {len(body_lines) - end} more lines (ctrl+d)", style="dim italic")
    text.append(f"\n{pr.url}", style="underline")
    return text


def render_repository(repository: RepositoryConfig, total: int) -> Text:
    text = Text()
    text.append(f"{repository.repo_id}\n", style="bold")
    text.append(f"{total} open pull request{'s' if total != 1 else ''}\n")
    if repository.local_path is not None:
        text.append(f"Local path: {repository.local_path}", style="dim")
    else:
        text.append("No local path configured", style="dim italic")
    return text
