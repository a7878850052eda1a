"""Review command launcher abstraction for testability.

The review action runs a user-configured command (typically a terminal or an
editor) inside the local checkout of the selected pull request's repository.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ReviewCommand:
    """A fully resolved review command.

    Attributes:
        command: Executable to run
        args: Arguments passed to the executable
        cwd: Working directory (the repository's local checkout)
    """

    command: str
    args: tuple[str, ...]
    cwd: str


class ReviewLaunchError(Exception):
    """The review command could not be started."""


class ReviewLauncher(ABC):
    """Abstract interface for spawning review commands."""

    @abstractmethod
    def launch(self, review_command: ReviewCommand) -> None:
        """Start the review command without waiting for it to finish.

        Args:
            review_command: Command, arguments and working directory

        Raises:
            ReviewLaunchError: If the working directory or executable is missing
        """
        ...
