"""Errors raised by pull request data sources.

Every FetchError is non-fatal for the dashboard: it is recorded against the
repository that failed and that repository keeps its previous snapshot.
"""

from __future__ import annotations

from enum import Enum


class FetchErrorKind(Enum):
    """Category of a fetch failure, used for status line rendering."""

    NETWORK = "network error"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate limited"
    AUTH = "auth failure"
    NOT_FOUND = "not found"
    API = "api error"
    INVALID = "invalid data"


class FetchError(Exception):
    """Base class for failures fetching pull requests for one repository."""

    kind: FetchErrorKind = FetchErrorKind.API

    def __init__(self, message: str, *, kind: FetchErrorKind | None = None) -> None:
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    @property
    def transient(self) -> bool:
        """True when retrying on the next cycle may succeed."""
        return True

    def describe(self) -> str:
        """Short human-readable status line, e.g. 'rate limited: retry in 60s'."""
        return f"{self.kind.value}: {self.message}"


class TransientFetchError(FetchError):
    """Network failure, timeout or server error."""

    kind = FetchErrorKind.NETWORK


class RateLimitedError(TransientFetchError):
    """GitHub rejected the request because the rate limit was exceeded."""

    kind = FetchErrorKind.RATE_LIMITED

    def __init__(self, message: str, *, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class AuthError(FetchError):
    """Bad, expired or missing credential.

    Surfaced for every repository of the bucket until the configuration is
    reloaded.
    """

    kind = FetchErrorKind.AUTH

    @property
    def transient(self) -> bool:
        return False


class RepositoryNotFoundError(FetchError):
    """Repository does not exist or is not visible with the current token."""

    kind = FetchErrorKind.NOT_FOUND

    @property
    def transient(self) -> bool:
        return False


class ReconciliationInvariantViolation(Exception):
    """A commit to the store was malformed and has been rejected.

    Raised for duplicate pull request numbers within one commit, or pull
    requests that belong to a different repository than the one committed.
    """

    def __init__(self, *, repository: str, reason: str) -> None:
        super().__init__(f"Rejected commit for {repository}: {reason}")
        self.repository = repository
        self.reason = reason
