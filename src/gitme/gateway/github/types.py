"""Type definitions for GitHub pull request data."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto


class Role(Enum):
    """Relationship between the tracked user and a pull request.

    Each role gets its own bucket (store snapshots + view state) in the dashboard.
    """

    REVIEW_REQUESTED = auto()
    AUTHORED = auto()


class PullRequestStatus(Enum):
    """Lifecycle status of a pull request."""

    OPEN = "OPEN"
    DRAFT = "DRAFT"
    MERGED = "MERGED"
    CLOSED = "CLOSED"

    @property
    def is_open(self) -> bool:
        """True for statuses the dashboard keeps (open or draft)."""
        return self in (PullRequestStatus.OPEN, PullRequestStatus.DRAFT)


@dataclass(frozen=True, order=True)
class RepositoryId:
    """GitHub repository identity (owner + name)."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        """Return 'owner/name'."""
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class RepositoryConfig:
    """A tracked repository.

    Attributes:
        repo_id: Repository identity
        local_path: Local checkout used as working directory for review commands,
            None when no checkout is configured
    """

    repo_id: RepositoryId
    local_path: str | None = None


@dataclass(frozen=True)
class Review:
    """A submitted review on a pull request."""

    author: str
    state: str  # "APPROVED", "CHANGES_REQUESTED", "COMMENTED", ...
    submitted_at: datetime | None


@dataclass(frozen=True)
class PullRequest:
    """Immutable snapshot of a pull request as returned by one fetch.

    Never patched in place: every refresh replaces the whole set of
    PullRequests for a repository.
    """

    repository: RepositoryId
    number: int
    title: str
    url: str
    author: str
    status: PullRequestStatus
    labels: tuple[str, ...]
    reviewers: tuple[str, ...]
    updated_at: datetime
    body: str = ""
    base_ref: str = ""
    head_ref: str = ""
    assignees: tuple[str, ...] = ()
    reviews: tuple[Review, ...] = ()

    @property
    def key(self) -> tuple[RepositoryId, int]:
        """Identity of the pull request across refreshes."""
        return (self.repository, self.number)

    @property
    def is_draft(self) -> bool:
        return self.status == PullRequestStatus.DRAFT
