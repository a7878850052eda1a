"""Object passed to every CLI command through click's ctx.obj."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from gitme.core.config import GitmeConfig, default_config_path
from gitme.tui.context import GitmeDashContext

DashContextFactory = Callable[[GitmeConfig, Path], GitmeDashContext]


@dataclass(frozen=True)
class CliContext:
    """Where the configuration lives and how to build the dashboard's dependencies.

    Tests construct one with a temporary config path and a factory returning
    GitmeDashContext.for_test(...), then pass it as `obj` to CliRunner.invoke.
    """

    config_path: Path
    dash_context_factory: DashContextFactory

    @classmethod
    def for_production(cls, config_path: Path | None = None) -> "CliContext":
        return cls(
            config_path=config_path or default_config_path(),
            dash_context_factory=GitmeDashContext.for_production,
        )
