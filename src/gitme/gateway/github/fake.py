"""Fake PrDataSource implementation for testing.

FakePrDataSource returns canned pull requests (or raises canned errors) per
(role, repository) without any network access. Fetches can be held open with
block()/release() to exercise in-flight behavior.
"""

import asyncio
from datetime import UTC, datetime

from gitme.gateway.github.abc import PrDataSource
from gitme.gateway.github.errors import FetchError
from gitme.gateway.github.types import (
    PullRequest,
    PullRequestStatus,
    RepositoryId,
    Role,
)


class FakePrDataSource(PrDataSource):
    """In-memory fake that serves canned data and records every fetch."""

    def __init__(
        self,
        pull_requests: dict[tuple[Role, RepositoryId], list[PullRequest]] | None = None,
        errors: dict[tuple[Role, RepositoryId], FetchError] | None = None,
    ) -> None:
        """Initialize with optional canned data.

        Args:
            pull_requests: Pull requests returned per (role, repository);
                missing keys return an empty list
            errors: Errors raised per (role, repository), checked before data
        """
        self._pull_requests = dict(pull_requests or {})
        self._errors = dict(errors or {})
        self._fetch_calls: list[tuple[Role, RepositoryId, str]] = []
        self._gate: asyncio.Event | None = None
        self._closed = False

    async def fetch(
        self, role: Role, repository: RepositoryId, username: str
    ) -> list[PullRequest]:
        self._fetch_calls.append((role, repository, username))
        if self._gate is not None:
            await self._gate.wait()
        error = self._errors.get((role, repository))
        if error is not None:
            raise error
        return list(self._pull_requests.get((role, repository), []))

    async def aclose(self) -> None:
        self._closed = True

    def set_pull_requests(
        self, role: Role, repository: RepositoryId, pull_requests: list[PullRequest]
    ) -> None:
        """Replace the canned pull requests for (role, repository)."""
        self._pull_requests[(role, repository)] = list(pull_requests)

    def set_error(self, role: Role, repository: RepositoryId, error: FetchError | None) -> None:
        """Make fetches for (role, repository) raise `error`, or clear it with None."""
        if error is None:
            self._errors.pop((role, repository), None)
        else:
            self._errors[(role, repository)] = error

    def block(self) -> None:
        """Hold every subsequent fetch until release() is called."""
        self._gate = asyncio.Event()

    def release(self) -> None:
        """Let held fetches complete and stop holding new ones."""
        if self._gate is not None:
            self._gate.set()
        self._gate = None

    @property
    def fetch_calls(self) -> list[tuple[Role, RepositoryId, str]]:
        """Every (role, repository, username) passed to fetch(), in call order.

        This property is for test assertions only.
        """
        return self._fetch_calls

    @property
    def fetch_count(self) -> int:
        """Number of times fetch was called."""
        return len(self._fetch_calls)

    @property
    def closed(self) -> bool:
        return self._closed


def make_pull_request(
    number: int,
    title: str = "Test PR",
    *,
    repository: RepositoryId | None = None,
    author: str = "octocat",
    status: PullRequestStatus = PullRequestStatus.OPEN,
    labels: tuple[str, ...] = (),
    reviewers: tuple[str, ...] = (),
    updated_at: datetime | None = None,
    day: int = 1,
    url: str | None = None,
    body: str = "",
) -> PullRequest:
    """Create a PullRequest for testing with sensible defaults.

    Args:
        number: Pull request number
        title: Pull request title
        repository: Repository (defaults to test/repo)
        author: Author login
        status: Pull request status
        labels: Label names
        reviewers: Reviewer logins
        updated_at: Last update time; derived from `day` when None
        day: Day of January 2024 used for updated_at when not given
        url: URL (defaults to the GitHub URL pattern)
        body: Pull request description

    Returns:
        PullRequest populated with test data
    """
    if repository is None:
        repository = RepositoryId(owner="test", name="repo")
    if updated_at is None:
        updated_at = datetime(2024, 1, day, tzinfo=UTC)
    if url is None:
        url = f"https://github.com/{repository.full_name}/pull/{number}"
    return PullRequest(
        repository=repository,
        number=number,
        title=title,
        url=url,
        author=author,
        status=status,
        labels=labels,
        reviewers=reviewers,
        updated_at=updated_at,
        body=body,
    )
