"""Pure sorting logic for TUI dashboard."""

from collections.abc import Iterable

from gitme.gateway.github.types import PullRequest
from gitme.tui.sorting.types import SortKey


def sort_pull_requests(
    pull_requests: Iterable[PullRequest], sort_key: SortKey
) -> tuple[PullRequest, ...]:
    """Sort pull requests of one group by the given key.

    Both orders are total (ties broken by number) so repeated calls on the same
    data always yield the same sequence, which keeps selection indexes stable.

    Args:
        pull_requests: Pull requests to sort
        sort_key: Which field to sort by

    Returns:
        Sorted tuple. The input is not modified.
    """
    if sort_key == SortKey.NUMBER:
        # Newest number first
        return tuple(sorted(pull_requests, key=lambda pr: pr.number, reverse=True))

    # Update time descending, ties by number ascending
    return tuple(
        sorted(pull_requests, key=lambda pr: (-pr.updated_at.timestamp(), pr.number))
    )
