"""View state and row types for the grouped pull request list."""

from __future__ import annotations

from dataclasses import dataclass, field

from gitme.gateway.github.types import PullRequest, RepositoryConfig, RepositoryId
from gitme.tui.data.types import Group, RepositoryStatus

# Identity of a row across rebuilds: ("repo", repo_id) or ("pr", repo_id, number)
RowKey = tuple[str, RepositoryId] | tuple[str, RepositoryId, int]


@dataclass(frozen=True)
class HeaderRow:
    """Group header row for one repository.

    Attributes:
        repository: The configured repository
        total: Pull requests in the group before search filtering
        matching: Pull requests in the group matching the search
        expanded: Whether the group's pull request rows are visible
        status: Freshness of the group's snapshot
    """

    repository: RepositoryConfig
    total: int
    matching: int
    expanded: bool
    status: RepositoryStatus

    @property
    def repo_id(self) -> RepositoryId:
        return self.repository.repo_id

    @property
    def key(self) -> RowKey:
        return ("repo", self.repo_id)

    @staticmethod
    def from_group(group: Group, *, expanded: bool) -> HeaderRow:
        return HeaderRow(
            repository=group.repository,
            total=group.total,
            matching=len(group.pull_requests),
            expanded=expanded,
            status=group.status,
        )


@dataclass(frozen=True)
class PullRequestRow:
    """Row for one pull request inside an expanded group."""

    pull_request: PullRequest

    @property
    def repo_id(self) -> RepositoryId:
        return self.pull_request.repository

    @property
    def key(self) -> RowKey:
        return ("pr", self.pull_request.repository, self.pull_request.number)


Row = HeaderRow | PullRequestRow


@dataclass
class ViewState:
    """Per-bucket UI state, independent of fetch timing.

    Only mutated through Bucket operations and refresh reconciliation.

    Attributes:
        expanded: Repositories whose groups are expanded
        selected_index: Index of the selected visible row, None for no selection
        search_query: Active search text
    """

    expanded: set[RepositoryId] = field(default_factory=set)
    selected_index: int | None = None
    search_query: str = ""
