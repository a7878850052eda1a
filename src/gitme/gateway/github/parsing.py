"""Parsing utilities for GitHub GraphQL responses."""

from datetime import datetime
from typing import Any

from gitme.gateway.github.types import (
    PullRequest,
    PullRequestStatus,
    RepositoryId,
    Review,
    Role,
)


def parse_github_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by GitHub ('2024-01-15T10:30:00Z')."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _logins(connection: dict[str, Any] | None, field: str = "login") -> tuple[str, ...]:
    """Extract a tuple of string fields from a GraphQL `{nodes: [...]}` connection."""
    if not connection:
        return ()
    result: list[str] = []
    for node in connection.get("nodes") or []:
        if node and node.get(field):
            result.append(node[field])
    return tuple(result)


def _requested_reviewers(connection: dict[str, Any] | None) -> tuple[str, ...]:
    """Extract requested reviewer logins (users) or slugs (teams)."""
    if not connection:
        return ()
    result: list[str] = []
    for node in connection.get("nodes") or []:
        reviewer = (node or {}).get("requestedReviewer") or {}
        name = reviewer.get("login") or reviewer.get("slug")
        if name:
            result.append(name)
    return tuple(result)


def _parse_reviews(connection: dict[str, Any] | None) -> tuple[Review, ...]:
    if not connection:
        return ()
    reviews: list[Review] = []
    for node in connection.get("nodes") or []:
        if not node:
            continue
        author = (node.get("author") or {}).get("login", "")
        reviews.append(
            Review(
                author=author,
                state=node.get("state", ""),
                submitted_at=parse_github_datetime(node.get("submittedAt")),
            )
        )
    return tuple(reviews)


def _parse_status(node: dict[str, Any]) -> PullRequestStatus:
    state = node.get("state", "OPEN")
    if state == "MERGED":
        return PullRequestStatus.MERGED
    if state == "CLOSED":
        return PullRequestStatus.CLOSED
    if node.get("isDraft"):
        return PullRequestStatus.DRAFT
    return PullRequestStatus.OPEN


def parse_pull_request(node: dict[str, Any], repository: RepositoryId) -> PullRequest:
    """Convert one GraphQL pull request node into a PullRequest.

    Args:
        node: `pullRequests.nodes[]` entry from REPOSITORY_PULL_REQUESTS_QUERY
        repository: Repository the node was fetched from

    Returns:
        Immutable PullRequest snapshot
    """
    reviews = _parse_reviews(node.get("reviews"))
    requested = _requested_reviewers(node.get("reviewRequests"))

    # Requested reviewers first, then whoever already reviewed, without duplicates
    reviewers: list[str] = list(requested)
    for review in reviews:
        if review.author and review.author not in reviewers:
            reviewers.append(review.author)

    updated_at = parse_github_datetime(node.get("updatedAt"))
    if updated_at is None:
        msg = f"Pull request #{node.get('number')} of {repository} has no updatedAt"
        raise ValueError(msg)

    return PullRequest(
        repository=repository,
        number=int(node["number"]),
        title=node.get("title", ""),
        url=node.get("url", ""),
        author=(node.get("author") or {}).get("login", ""),
        status=_parse_status(node),
        labels=_logins(node.get("labels"), field="name"),
        reviewers=tuple(reviewers),
        updated_at=updated_at,
        body=node.get("body") or "",
        base_ref=node.get("baseRefName", ""),
        head_ref=node.get("headRefName", ""),
        assignees=_logins(node.get("assignees")),
        reviews=reviews,
    )


def parse_repository_pull_requests(
    data: dict[str, Any], repository: RepositoryId
) -> list[PullRequest]:
    """Parse the `repository` object of a REPOSITORY_PULL_REQUESTS_QUERY response."""
    connection = data.get("pullRequests") or {}
    return [
        parse_pull_request(node, repository) for node in connection.get("nodes") or [] if node
    ]


def classify_role(pr: PullRequest, username: str) -> Role | None:
    """Determine which dashboard bucket a pull request belongs to for a user.

    Authoring (or being assigned) wins over reviewing: a pull request the user
    authored is never shown as waiting on their review. Being a reviewer means
    either being currently requested or having already submitted a review,
    since GitHub drops requested reviewers once they review.

    Args:
        pr: Pull request to classify
        username: GitHub login of the tracked user

    Returns:
        The matching Role, or None if the pull request is unrelated to the user
    """
    login = username.lower()
    if pr.author.lower() == login or login in (a.lower() for a in pr.assignees):
        return Role.AUTHORED
    if login in (r.lower() for r in pr.reviewers):
        return Role.REVIEW_REQUESTED
    return None


def filter_by_role(prs: list[PullRequest], role: Role, username: str) -> list[PullRequest]:
    """Keep the pull requests classified under `role` for `username`."""
    return [pr for pr in prs if classify_role(pr, username) == role]
