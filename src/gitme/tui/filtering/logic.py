"""Pure filtering logic for TUI dashboard."""

from collections.abc import Sequence

from gitme.gateway.github.types import PullRequest


def matches_query(pr: PullRequest, query_lower: str) -> bool:
    """Check one pull request against an already lower-cased query."""
    # Check repository name (with and without owner)
    if query_lower in pr.repository.full_name.lower():
        return True

    # Check pull request number
    if query_lower in str(pr.number):
        return True

    # Check title (case-insensitive)
    return query_lower in pr.title.lower()


def filter_pull_requests(
    pull_requests: Sequence[PullRequest], query: str
) -> tuple[PullRequest, ...]:
    """Filter pull requests by query matching repository name, number, or title.

    Case-insensitive substring matching against:
    - Repository name ("owner/name")
    - Pull request number (as string)
    - Title

    Args:
        pull_requests: Pull requests to filter, in display order
        query: Search query string

    Returns:
        Matching pull requests in their original order.
        Returns all pull requests if query is empty.
    """
    if not query:
        return tuple(pull_requests)

    query_lower = query.lower()
    return tuple(pr for pr in pull_requests if matches_query(pr, query_lower))
