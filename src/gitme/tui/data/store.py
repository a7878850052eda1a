"""Reconciled pull request snapshots, per bucket and repository."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime

from gitme.gateway.github.errors import (
    AuthError,
    FetchError,
    ReconciliationInvariantViolation,
)
from gitme.gateway.github.types import PullRequest, RepositoryConfig, RepositoryId, Role
from gitme.tui.data.types import Group, RepositoryStatus
from gitme.tui.filtering.logic import filter_pull_requests
from gitme.tui.sorting.logic import sort_pull_requests
from gitme.tui.sorting.types import SortKey

logger = logging.getLogger(__name__)

Snapshot = tuple[PullRequest, ...]


class PrStore:
    """Latest pull request snapshot for every (role, repository) pair.

    Each commit replaces the whole snapshot of one pair with a new immutable
    tuple, and the per-role mapping itself is replaced rather than mutated.
    A reader holding a mapping or a tuple therefore never observes a mix of
    two generations for the same repository.

    Group existence comes from the configured repositories, not from content:
    a repository with no pull requests still yields an (empty) Group.
    """

    def __init__(self, repositories: Sequence[RepositoryConfig]) -> None:
        self._repositories: tuple[RepositoryConfig, ...] = ()
        self._snapshots: dict[Role, Mapping[RepositoryId, Snapshot]] = {role: {} for role in Role}
        self._statuses: dict[Role, Mapping[RepositoryId, RepositoryStatus]] = {
            role: {} for role in Role
        }
        self._auth_errors: dict[Role, AuthError | None] = {role: None for role in Role}
        self.set_repositories(repositories)

    @property
    def repositories(self) -> tuple[RepositoryConfig, ...]:
        return self._repositories

    def set_repositories(self, repositories: Sequence[RepositoryConfig]) -> None:
        """Replace the configured repositories.

        Snapshots of repositories that stay configured are kept; new ones start
        empty and removed ones are dropped.
        """
        self._repositories = tuple(repositories)
        repo_ids = [repo.repo_id for repo in self._repositories]
        for role in Role:
            old_snapshots = self._snapshots[role]
            old_statuses = self._statuses[role]
            self._snapshots[role] = {rid: old_snapshots.get(rid, ()) for rid in repo_ids}
            self._statuses[role] = {
                rid: old_statuses.get(rid, RepositoryStatus.initial()) for rid in repo_ids
            }

    def commit(
        self,
        role: Role,
        repository: RepositoryId,
        pull_requests: Iterable[PullRequest],
        *,
        at: datetime | None = None,
    ) -> int:
        """Atomically replace the snapshot of (role, repository).

        Only open and draft pull requests are retained. A malformed commit is
        rejected as a whole and the previous snapshot stays in place.

        Args:
            role: Bucket being committed
            repository: Repository the pull requests were fetched from
            pull_requests: The complete new set for the pair
            at: Time of the fetch, defaults to now

        Returns:
            Number of pull requests retained

        Raises:
            ReconciliationInvariantViolation: If the repository is not configured,
                a pull request belongs to another repository, or a number appears
                twice
        """
        prs = tuple(pull_requests)
        try:
            self._validate(repository, prs)
        except ReconciliationInvariantViolation as e:
            logger.warning("%s (keeping previous snapshot)", e)
            raise

        snapshot = tuple(pr for pr in prs if pr.status.is_open)
        self._snapshots[role] = {**self._snapshots[role], repository: snapshot}
        self._set_status(
            role,
            repository,
            RepositoryStatus(last_updated=at or datetime.now(UTC), error=None),
        )
        logger.debug("Committed %d PRs for %s (%s)", len(snapshot), repository, role.name)
        return len(snapshot)

    def _validate(self, repository: RepositoryId, prs: Snapshot) -> None:
        if repository not in self._snapshots[Role.REVIEW_REQUESTED]:
            raise ReconciliationInvariantViolation(
                repository=repository.full_name, reason="repository is not configured"
            )
        seen: set[int] = set()
        for pr in prs:
            if pr.repository != repository:
                raise ReconciliationInvariantViolation(
                    repository=repository.full_name,
                    reason=f"PR #{pr.number} belongs to {pr.repository}",
                )
            if pr.number in seen:
                raise ReconciliationInvariantViolation(
                    repository=repository.full_name,
                    reason=f"duplicate PR #{pr.number}",
                )
            seen.add(pr.number)

    def record_failure(self, role: Role, repository: RepositoryId, error: FetchError) -> None:
        """Mark (role, repository) as stale with `error`; its snapshot is untouched."""
        previous = self.status(role, repository)
        self._set_status(
            role,
            repository,
            RepositoryStatus(last_updated=previous.last_updated, error=error),
        )
        if isinstance(error, AuthError):
            self._auth_errors[role] = error

    def _set_status(self, role: Role, repository: RepositoryId, status: RepositoryStatus) -> None:
        if repository not in self._statuses[role]:
            return
        self._statuses[role] = {**self._statuses[role], repository: status}

    def status(self, role: Role, repository: RepositoryId) -> RepositoryStatus:
        return self._statuses[role].get(repository, RepositoryStatus.initial())

    def statuses(self, role: Role) -> Mapping[RepositoryId, RepositoryStatus]:
        return self._statuses[role]

    def auth_error(self, role: Role) -> AuthError | None:
        """Sticky authentication failure of the bucket, if any."""
        return self._auth_errors[role]

    def clear_auth_errors(self) -> None:
        """Forget authentication failures (after the configuration changed)."""
        self._auth_errors = {role: None for role in Role}

    def snapshot(self, role: Role, repository: RepositoryId) -> Snapshot:
        return self._snapshots[role].get(repository, ())

    def pull_request_count(self, role: Role) -> int:
        return sum(len(snapshot) for snapshot in self._snapshots[role].values())

    def query(
        self, role: Role, search_query: str = "", sort_key: SortKey = SortKey.UPDATED
    ) -> list[Group]:
        """Return the groups of a bucket, in configuration order.

        Args:
            role: Bucket to query
            search_query: Case-insensitive substring over repository name,
                PR number and title; empty returns everything
            sort_key: Order of pull requests within each group

        Returns:
            One Group per configured repository, including empty ones
        """
        snapshots = self._snapshots[role]
        statuses = self._statuses[role]
        groups: list[Group] = []
        for repo in self._repositories:
            snapshot = snapshots.get(repo.repo_id, ())
            ordered = sort_pull_requests(snapshot, sort_key)
            groups.append(
                Group(
                    repository=repo,
                    pull_requests=filter_pull_requests(ordered, search_query),
                    total=len(snapshot),
                    status=statuses.get(repo.repo_id, RepositoryStatus.initial()),
                )
            )
        return groups
