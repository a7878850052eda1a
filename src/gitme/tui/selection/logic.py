"""Pure row building and selection logic for the grouped pull request list."""

from collections.abc import Collection, Sequence

from gitme.gateway.github.types import RepositoryId
from gitme.tui.data.types import Group
from gitme.tui.selection.types import HeaderRow, PullRequestRow, Row, RowKey


def build_visible_rows(groups: Sequence[Group], expanded: Collection[RepositoryId]) -> list[Row]:
    """Flatten groups into the visible row sequence.

    Each group emits its header row; expanded groups also emit one row per
    pull request, in group order.

    Args:
        groups: Groups in store order
        expanded: Repositories whose groups are expanded

    Returns:
        Visible rows, top to bottom
    """
    rows: list[Row] = []
    for group in groups:
        is_expanded = group.repo_id in expanded
        rows.append(HeaderRow.from_group(group, expanded=is_expanded))
        if is_expanded:
            rows.extend(PullRequestRow(pr) for pr in group.pull_requests)
    return rows


def row_key_at(rows: Sequence[Row], index: int | None) -> RowKey | None:
    """Identity of the row at `index`, None when out of range or no selection."""
    if index is None or not 0 <= index < len(rows):
        return None
    return rows[index].key


def find_row(rows: Sequence[Row], key: RowKey) -> int | None:
    """Index of the row with identity `key`, None if it is not visible."""
    for index, row in enumerate(rows):
        if row.key == key:
            return index
    return None


def reclamp_selection(
    rows: Sequence[Row], previous_key: RowKey | None, previous_index: int | None
) -> int | None:
    """Pick the selection after the visible rows changed.

    Order of preference:
    1. The previously selected row, wherever it moved to
    2. For a vanished pull request row, its group header if visible
    3. The same index if still valid, otherwise the last row
    4. None when there are no rows or there was no selection

    Args:
        rows: New visible rows
        previous_key: Identity of the row selected before the change
        previous_index: Index selected before the change

    Returns:
        New selected index, always valid for `rows` or None
    """
    if not rows:
        return None

    if previous_key is not None:
        index = find_row(rows, previous_key)
        if index is not None:
            return index
        if previous_key[0] == "pr":
            header_index = find_row(rows, ("repo", previous_key[1]))
            if header_index is not None:
                return header_index

    if previous_index is None:
        return None
    return min(max(previous_index, 0), len(rows) - 1)


def move_index(index: int | None, delta: int, row_count: int) -> int | None:
    """Move a selection by `delta` rows, clamped to the bounds (no wraparound).

    From no selection, moving down selects the first row and moving up the last.
    """
    if row_count == 0:
        return None
    if index is None:
        return 0 if delta >= 0 else row_count - 1
    return min(max(index + delta, 0), row_count - 1)


def adjacent_header_index(rows: Sequence[Row], index: int | None, direction: int) -> int | None:
    """Index of the next (direction=1) or previous (direction=-1) header row.

    From a pull request row, moving backwards lands on its own group header.
    Returns `index` unchanged when there is no header in that direction.
    """
    if not rows:
        return None
    if index is None:
        return move_index(None, direction, len(rows))

    position = index + direction
    while 0 <= position < len(rows):
        if isinstance(rows[position], HeaderRow):
            return position
        position += direction
    return index
