"""Production PrDataSource backed by the GitHub GraphQL API."""

import logging
import time
from typing import Any

import httpx

from gitme.gateway.github.abc import PrDataSource
from gitme.gateway.github.errors import (
    AuthError,
    FetchError,
    FetchErrorKind,
    RateLimitedError,
    RepositoryNotFoundError,
    TransientFetchError,
)
from gitme.gateway.github.graphql_queries import (
    GITHUB_GRAPHQL_URL,
    REPOSITORY_PULL_REQUESTS_QUERY,
)
from gitme.gateway.github.parsing import filter_by_role, parse_repository_pull_requests
from gitme.gateway.github.types import PullRequest, RepositoryId, Role

logger = logging.getLogger(__name__)

USER_AGENT = "gitme"


class RealPrDataSource(PrDataSource):
    """Fetches open pull requests with one GraphQL query per repository.

    Transport and API failures are translated into FetchError subclasses so
    the scheduler can record them per repository.
    """

    def __init__(
        self,
        *,
        token: str,
        client: httpx.AsyncClient | None = None,
        endpoint: str = GITHUB_GRAPHQL_URL,
        timeout: float | None = 20.0,
    ) -> None:
        """Initialize the data source.

        Args:
            token: GitHub token sent as bearer credential
            client: Optional preconfigured client (tests inject a MockTransport)
            endpoint: GraphQL endpoint URL
            timeout: Per-request timeout in seconds, None for no limit
        """
        self._endpoint = endpoint
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = {
            "Authorization": f"Bearer {token}",
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }

    async def fetch(
        self, role: Role, repository: RepositoryId, username: str
    ) -> list[PullRequest]:
        data = await self._query_repository(repository)
        try:
            prs = parse_repository_pull_requests(data, repository)
        except (KeyError, TypeError, ValueError) as e:
            raise FetchError(
                f"Could not parse response for {repository}: {e}", kind=FetchErrorKind.INVALID
            ) from e
        matching = filter_by_role(prs, role, username)
        logger.debug(
            "Fetched %d open PRs from %s, %d match %s", len(prs), repository, len(matching), role
        )
        return matching

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _query_repository(self, repository: RepositoryId) -> dict[str, Any]:
        """Run REPOSITORY_PULL_REQUESTS_QUERY and return the `repository` object."""
        body = {
            "query": REPOSITORY_PULL_REQUESTS_QUERY,
            "variables": {"owner": repository.owner, "name": repository.name},
        }
        try:
            response = await self._client.post(self._endpoint, json=body, headers=self._headers)
        except httpx.TimeoutException as e:
            raise TransientFetchError(
                f"Request for {repository} timed out", kind=FetchErrorKind.TIMEOUT
            ) from e
        except httpx.HTTPError as e:
            raise TransientFetchError(f"Error requesting github api: {e}") from e

        _raise_for_status(response, repository)

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(
                "Could not unmarshal api response", kind=FetchErrorKind.INVALID
            ) from e

        if not isinstance(payload, dict):
            raise FetchError(
                f"Expected a JSON object from github api, got {type(payload).__name__}",
                kind=FetchErrorKind.INVALID,
            )

        errors = payload.get("errors")
        if errors:
            _raise_for_graphql_errors(errors, repository)

        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise FetchError("Malformed data in github api response", kind=FetchErrorKind.INVALID)
        repo_data = data.get("repository")
        if repo_data is None:
            raise RepositoryNotFoundError(f"Repository {repository} not found")
        if not isinstance(repo_data, dict):
            raise FetchError(
                "Malformed repository in github api response", kind=FetchErrorKind.INVALID
            )
        return repo_data


def _raise_for_status(response: httpx.Response, repository: RepositoryId) -> None:
    """Translate non-2xx HTTP responses into FetchError subclasses."""
    status = response.status_code
    if status < 400:
        return

    if status == 401:
        raise AuthError("Bad credentials (HTTP 401)")

    if status in (403, 429):
        retry_after = _retry_after_seconds(response)
        if status == 429 or response.headers.get("x-ratelimit-remaining") == "0":
            raise RateLimitedError(
                f"Rate limit exceeded for {repository}", retry_after=retry_after
            )
        if "rate limit" in response.text.lower():
            raise RateLimitedError(
                f"Secondary rate limit hit for {repository}", retry_after=retry_after
            )
        raise AuthError(f"Forbidden (HTTP 403) for {repository}")

    if status == 404:
        raise RepositoryNotFoundError(f"Repository {repository} not found (HTTP 404)")

    if status >= 500:
        raise TransientFetchError(f"GitHub returned HTTP {status}")

    raise FetchError(f"GitHub returned HTTP {status}", kind=FetchErrorKind.API)


def _retry_after_seconds(response: httpx.Response) -> float | None:
    """Seconds until the rate limit resets, from Retry-After or x-ratelimit-reset."""
    retry_after = response.headers.get("retry-after")
    if retry_after is not None and retry_after.isdigit():
        return float(retry_after)
    reset = response.headers.get("x-ratelimit-reset")
    if reset is not None and reset.isdigit():
        return max(0.0, float(reset) - time.time())
    return None


def _raise_for_graphql_errors(errors: list[dict[str, Any]], repository: RepositoryId) -> None:
    """Translate a GraphQL `errors` array into the most specific FetchError."""
    if not isinstance(errors, list) or not all(isinstance(error, dict) for error in errors):
        raise FetchError("Malformed errors in github api response", kind=FetchErrorKind.INVALID)
    types = {error.get("type") for error in errors}
    # If there's one or more errors return a string with all the messages
    message = "\n".join(str(error.get("message", "")) for error in errors)

    if "NOT_FOUND" in types:
        raise RepositoryNotFoundError(message or f"Repository {repository} not found")
    if "RATE_LIMITED" in types:
        raise RateLimitedError(message)
    if "FORBIDDEN" in types:
        raise AuthError(message)
    raise FetchError(message, kind=FetchErrorKind.API)
