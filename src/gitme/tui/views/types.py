"""View types for TUI dashboard: one view per bucket role."""

from __future__ import annotations

from dataclasses import dataclass

from gitme.gateway.github.types import Role


@dataclass(frozen=True)
class ViewConfig:
    """Configuration for the view of one bucket.

    Attributes:
        role: The bucket this view shows
        display_name: Human-readable name for the view
        key_hint: Key binding hint (e.g., "1", "2")
        allows_review: Whether the review command is offered in this view
    """

    role: Role
    display_name: str
    key_hint: str
    allows_review: bool


REVIEW_REQUESTED_VIEW = ViewConfig(
    role=Role.REVIEW_REQUESTED,
    display_name="Review Requested",
    key_hint="1",
    allows_review=True,
)

AUTHORED_VIEW = ViewConfig(
    role=Role.AUTHORED,
    display_name="My Pull Requests",
    key_hint="2",
    allows_review=False,
)

VIEW_CONFIGS: tuple[ViewConfig, ...] = (REVIEW_REQUESTED_VIEW, AUTHORED_VIEW)


def get_view_config(role: Role) -> ViewConfig:
    """Look up the ViewConfig for a given role.

    Args:
        role: The bucket role to look up

    Returns:
        The corresponding ViewConfig
    """
    for config in VIEW_CONFIGS:
        if config.role == role:
            return config
    # Unreachable while every Role has a config, but satisfy the type checker
    return REVIEW_REQUESTED_VIEW


def get_next_role(role: Role) -> Role:
    """Role of the view after `role`, wrapping around (TAB)."""
    roles = [config.role for config in VIEW_CONFIGS]
    return roles[(roles.index(role) + 1) % len(roles)]


def get_previous_role(role: Role) -> Role:
    """Role of the view before `role`, wrapping around (shift+TAB)."""
    roles = [config.role for config in VIEW_CONFIGS]
    return roles[(roles.index(role) - 1) % len(roles)]
