"""Data types for the pull request store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from gitme.gateway.github.errors import FetchError
from gitme.gateway.github.types import PullRequest, RepositoryConfig, RepositoryId, Role


@dataclass(frozen=True)
class RepositoryStatus:
    """Freshness of one repository's snapshot within one bucket.

    Attributes:
        last_updated: Time of the last successful commit, None if never fetched
        error: Error of the most recent attempt, None if it succeeded
    """

    last_updated: datetime | None
    error: FetchError | None

    @staticmethod
    def initial() -> RepositoryStatus:
        """Status of a repository that has not been fetched yet."""
        return RepositoryStatus(last_updated=None, error=None)

    @property
    def stale(self) -> bool:
        """True when the shown data comes from before the latest failed attempt."""
        return self.error is not None

    @property
    def loaded(self) -> bool:
        return self.last_updated is not None


@dataclass(frozen=True)
class Group:
    """All pull requests of one repository within one bucket.

    Attributes:
        repository: The configured repository
        pull_requests: Pull requests matching the search, in display order
        total: Number of pull requests before search filtering
        status: Freshness of the snapshot the group was built from
    """

    repository: RepositoryConfig
    pull_requests: tuple[PullRequest, ...]
    total: int
    status: RepositoryStatus

    @property
    def repo_id(self) -> RepositoryId:
        return self.repository.repo_id


@dataclass(frozen=True)
class RepositoryOutcome:
    """Result of fetching one repository during a refresh cycle.

    Attributes:
        repo_id: Repository fetched
        count: Number of pull requests committed, None when the fetch failed
        error: Failure recorded for the repository, None on success
    """

    repo_id: RepositoryId
    count: int | None
    error: FetchError | None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class CycleResult:
    """Summary of one completed refresh cycle for one bucket.

    Attributes:
        role: Bucket that was refreshed
        started_at: Monotonic time the cycle started
        duration: Seconds the cycle took
        outcomes: One outcome per configured repository, in configuration order
    """

    role: Role
    started_at: float
    duration: float
    outcomes: tuple[RepositoryOutcome, ...] = field(default_factory=tuple)

    @property
    def failed(self) -> tuple[RepositoryOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.ok)

    @property
    def succeeded(self) -> tuple[RepositoryOutcome, ...]:
        return tuple(o for o in self.outcomes if o.ok)
