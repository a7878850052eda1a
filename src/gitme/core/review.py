"""Resolving the review command for a repository."""

import os
from collections.abc import Mapping
from pathlib import Path

from gitme.core.config import GitmeConfig
from gitme.gateway.github.types import RepositoryConfig
from gitme.gateway.review_launcher.abc import ReviewCommand, ReviewLaunchError

DEFAULT_REVIEW_COMMAND = "ghostty"


def build_review_command(
    config: GitmeConfig,
    repository: RepositoryConfig,
    *,
    env: Mapping[str, str] | None = None,
) -> ReviewCommand:
    """Build the command run by the review action for `repository`.

    The executable is the configured `command`, else $TERMINAL, else ghostty.

    Args:
        config: Loaded configuration
        repository: Repository whose local checkout becomes the working directory
        env: Environment to read $TERMINAL from, defaults to os.environ

    Returns:
        The command to launch

    Raises:
        ReviewLaunchError: If the repository has no local_path configured
    """
    if repository.local_path is None:
        raise ReviewLaunchError(f"No local_path configured for {repository.repo_id}")

    environ = os.environ if env is None else env
    command = config.command or environ.get("TERMINAL") or DEFAULT_REVIEW_COMMAND
    return ReviewCommand(
        command=command,
        args=config.command_args,
        cwd=str(Path(repository.local_path).expanduser()),
    )
