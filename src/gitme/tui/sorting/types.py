"""Sort state types for TUI dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class SortKey(Enum):
    """Available sort keys for pull requests within a repository group."""

    UPDATED = auto()  # Default: most recently updated first
    NUMBER = auto()  # Newest pull request number first


@dataclass(frozen=True)
class SortState:
    """State for sort mode.

    Attributes:
        key: Current sort key
    """

    key: SortKey

    @staticmethod
    def initial() -> SortState:
        """Create initial state with default sort (by update time)."""
        return SortState(key=SortKey.UPDATED)

    def toggle(self) -> SortState:
        """Toggle between sort keys.

        Returns:
            New state with next sort key
        """
        if self.key == SortKey.UPDATED:
            return SortState(key=SortKey.NUMBER)
        return SortState(key=SortKey.UPDATED)

    @property
    def display_label(self) -> str:
        """Get display label for current sort mode."""
        if self.key == SortKey.UPDATED:
            return "by recent activity"
        return "by PR#"
