"""View bar widget for TUI dashboard."""

from __future__ import annotations

from collections.abc import Mapping

from rich.text import Text
from textual.widgets import Static

from gitme.gateway.github.types import Role
from gitme.tui.views.types import VIEW_CONFIGS


class ViewBar(Static):
    """Top bar showing both buckets with the active one highlighted.

    Renders: 1:Review Requested (3)  2:My Pull Requests (5)
    Active view is bold white, inactive views are dimmed.
    """

    DEFAULT_CSS = """
    ViewBar {
        dock: top;
        height: 1;
        background: $surface;
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(self, *, active_role: Role) -> None:
        """Initialize the view bar.

        Args:
            active_role: Role of the bucket currently shown
        """
        super().__init__()
        self._active_role = active_role
        self._counts: Mapping[Role, int] = {}

    def on_mount(self) -> None:
        """Render the view bar on mount."""
        self._refresh_display()

    def set_active_role(self, role: Role) -> None:
        self._active_role = role
        self._refresh_display()

    def set_counts(self, counts: Mapping[Role, int]) -> None:
        """Update the number of pull requests shown next to each view."""
        self._counts = counts
        self._refresh_display()

    @property
    def active_role(self) -> Role:
        return self._active_role

    def _refresh_display(self) -> None:
        text = Text()
        for i, config in enumerate(VIEW_CONFIGS):
            if i > 0:
                text.append("  ")
            label = f"{config.key_hint}:{config.display_name}"
            count = self._counts.get(config.role)
            if count is not None:
                label += f" ({count})"
            if config.role == self._active_role:
                text.append(label, style="bold white")
            else:
                text.append(label, style="dim")
        self.update(text)
