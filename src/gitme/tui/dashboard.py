"""Selection and grouping state machine for the dashboard buckets.

A Bucket pairs the store's snapshots for one role with that role's ViewState.
Every operation that can change the visible rows re-clamps the selection so
that it keeps pointing at the same pull request (or repository) whenever that
row is still visible.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass

from gitme.gateway.github.errors import AuthError
from gitme.gateway.github.types import PullRequest, RepositoryConfig, RepositoryId, Role
from gitme.tui.data.store import PrStore
from gitme.tui.data.types import CycleResult, Group, RepositoryStatus
from gitme.tui.selection.logic import (
    adjacent_header_index,
    build_visible_rows,
    move_index,
    reclamp_selection,
    row_key_at,
)
from gitme.tui.selection.types import HeaderRow, PullRequestRow, Row, RowKey, ViewState
from gitme.tui.sorting.types import SortKey, SortState
from gitme.tui.views.types import get_next_role, get_previous_role

# Rows moved by page jumps (d/u)
PAGE_SIZE = 10

Activation = PullRequest | RepositoryConfig | None


@dataclass(frozen=True)
class BucketFrame:
    """Read-only projection of one bucket for the renderer.

    Attributes:
        role: Bucket role
        rows: Visible rows, top to bottom
        selected_index: Selected row index, None for no selection
        search_query: Active search text
        sort_key: Order of pull requests within groups
        refreshing: Whether a refresh cycle is in flight
        auth_error: Sticky authentication failure, shown for every repository
        statuses: Freshness per repository
    """

    role: Role
    rows: tuple[Row, ...]
    selected_index: int | None
    search_query: str
    sort_key: SortKey
    refreshing: bool
    auth_error: AuthError | None
    statuses: Mapping[RepositoryId, RepositoryStatus]

    @property
    def selected_row(self) -> Row | None:
        if self.selected_index is None:
            return None
        return self.rows[self.selected_index]

    @property
    def pull_request_count(self) -> int:
        """Pull requests matching the search, across all groups."""
        return sum(row.matching for row in self.rows if isinstance(row, HeaderRow))

    @property
    def stale_repositories(self) -> tuple[RepositoryId, ...]:
        return tuple(repo_id for repo_id, status in self.statuses.items() if status.stale)


@dataclass(frozen=True)
class DashboardFrame:
    """Read-only projection of the whole dashboard for one render."""

    active_role: Role
    buckets: Mapping[Role, BucketFrame]

    @property
    def active(self) -> BucketFrame:
        return self.buckets[self.active_role]


class Bucket:
    """Navigable, searchable view over the store's groups for one role."""

    def __init__(self, role: Role, store: PrStore, view: ViewState | None = None) -> None:
        self._role = role
        self._store = store
        self._view = view or ViewState()
        self._sort = SortState.initial()
        self._selected_key: RowKey | None = None

    @property
    def role(self) -> Role:
        return self._role

    @property
    def view(self) -> ViewState:
        return self._view

    @property
    def sort_state(self) -> SortState:
        return self._sort

    @property
    def selected_index(self) -> int | None:
        return self._view.selected_index

    def groups(self) -> list[Group]:
        return self._store.query(self._role, self._view.search_query, self._sort.key)

    def rows(self) -> list[Row]:
        return build_visible_rows(self.groups(), self._view.expanded)

    def selected_row(self) -> Row | None:
        rows = self.rows()
        index = self._view.selected_index
        if index is None or index >= len(rows):
            return None
        return rows[index]

    # Cursor movement -----------------------------------------------------

    def move_selection(self, delta: int) -> None:
        """Move the cursor by `delta` visible rows, clamped, without wraparound."""
        rows = self.rows()
        self._select(rows, move_index(self._view.selected_index, delta, len(rows)))

    def jump(self, delta_pages: int) -> None:
        """Move the cursor by whole pages."""
        self.move_selection(delta_pages * PAGE_SIZE)

    def next_repository(self) -> None:
        rows = self.rows()
        self._select(rows, adjacent_header_index(rows, self._view.selected_index, 1))

    def previous_repository(self) -> None:
        rows = self.rows()
        self._select(rows, adjacent_header_index(rows, self._view.selected_index, -1))

    # Structural changes --------------------------------------------------

    def toggle_expand(self, repo_id: RepositoryId) -> None:
        """Flip whether `repo_id`'s group is expanded."""

        def mutate() -> None:
            if repo_id in self._view.expanded:
                self._view.expanded.discard(repo_id)
            else:
                self._view.expanded.add(repo_id)

        self._restructure(mutate)

    def toggle_selected(self) -> None:
        """Expand or collapse the group under the cursor.

        On a pull request row this collapses its group, leaving the cursor on
        the group header.
        """
        row = self.selected_row()
        if row is None:
            return
        self.toggle_expand(row.repo_id)

    def expand_all(self) -> None:
        all_repos = {repo.repo_id for repo in self._store.repositories}
        self._restructure(lambda: self._set_expanded(all_repos))

    def collapse_all(self) -> None:
        self._restructure(lambda: self._set_expanded(set()))

    def set_search(self, text: str) -> None:
        """Replace the search query; matching never reorders pull requests."""

        def mutate() -> None:
            self._view.search_query = text

        self._restructure(mutate)

    def set_sort(self, key: SortKey) -> None:
        """Change the order within groups; the selected row follows its pull request."""

        def mutate() -> None:
            self._sort = SortState(key=key)

        self._restructure(mutate)

    def toggle_sort(self) -> None:
        self.set_sort(self._sort.toggle().key)

    def reconcile(self) -> None:
        """Re-clamp the selection after the store changed under this bucket.

        When nothing was selected yet, the first row gets selected so the
        cursor appears as soon as data is available.
        """
        rows = self.rows()
        index = reclamp_selection(rows, self._selected_key, self._view.selected_index)
        if index is None and self._selected_key is None and rows:
            index = 0
        self._select(rows, index)

    def activate_selection(self) -> Activation:
        """What the selected row stands for, for side actions.

        Returns:
            The pull request for a pull request row, the repository for the
            header of a group with matching pull requests, otherwise None
        """
        row = self.selected_row()
        if isinstance(row, PullRequestRow):
            return row.pull_request
        if isinstance(row, HeaderRow) and row.matching > 0:
            return row.repository
        return None

    def selected_pull_request(self) -> PullRequest | None:
        row = self.selected_row()
        if isinstance(row, PullRequestRow):
            return row.pull_request
        return None

    def frame(self, *, refreshing: bool) -> BucketFrame:
        return BucketFrame(
            role=self._role,
            rows=tuple(self.rows()),
            selected_index=self._view.selected_index,
            search_query=self._view.search_query,
            sort_key=self._sort.key,
            refreshing=refreshing,
            auth_error=self._store.auth_error(self._role),
            statuses=self._store.statuses(self._role),
        )

    def _set_expanded(self, repos: set[RepositoryId]) -> None:
        self._view.expanded = repos

    def _restructure(self, mutate: Callable[[], None]) -> None:
        mutate()
        rows = self.rows()
        self._select(rows, reclamp_selection(rows, self._selected_key, self._view.selected_index))

    def _select(self, rows: list[Row], index: int | None) -> None:
        self._view.selected_index = index
        self._selected_key = row_key_at(rows, index)


class Dashboard:
    """Both buckets plus which one is shown."""

    def __init__(self, store: PrStore, *, active_role: Role = Role.REVIEW_REQUESTED) -> None:
        self._store = store
        self._buckets = {role: Bucket(role, store) for role in Role}
        self._active_role = active_role

    @property
    def store(self) -> PrStore:
        return self._store

    @property
    def active_role(self) -> Role:
        return self._active_role

    @property
    def active(self) -> Bucket:
        return self._buckets[self._active_role]

    def bucket(self, role: Role) -> Bucket:
        return self._buckets[role]

    def switch_to(self, role: Role) -> None:
        self._active_role = role

    def next_view(self) -> None:
        self._active_role = get_next_role(self._active_role)

    def previous_view(self) -> None:
        self._active_role = get_previous_role(self._active_role)

    def on_cycle_complete(self, result: CycleResult) -> None:
        """Scheduler listener: re-clamp the refreshed bucket's selection."""
        self._buckets[result.role].reconcile()

    def reconcile_all(self) -> None:
        for bucket in self._buckets.values():
            bucket.reconcile()

    def frame(self, refreshing: Collection[Role] = ()) -> DashboardFrame:
        return DashboardFrame(
            active_role=self._active_role,
            buckets={
                role: bucket.frame(refreshing=role in refreshing)
                for role, bucket in self._buckets.items()
            },
        )
