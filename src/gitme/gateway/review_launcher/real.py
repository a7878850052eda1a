"""Real ReviewLauncher implementation using subprocess."""

import logging
import subprocess
from pathlib import Path

from gitme.gateway.review_launcher.abc import ReviewCommand, ReviewLauncher, ReviewLaunchError

logger = logging.getLogger(__name__)


class RealReviewLauncher(ReviewLauncher):
    """Spawns the review command detached from the dashboard's terminal."""

    def launch(self, review_command: ReviewCommand) -> None:
        cwd = Path(review_command.cwd).expanduser()
        if not cwd.is_dir():
            msg = f"Local path does not exist: {cwd}"
            raise ReviewLaunchError(msg)

        logger.debug("Launching %s %s in %s", review_command.command, review_command.args, cwd)
        try:
            subprocess.Popen(
                [review_command.command, *review_command.args],
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            msg = f"Could not run {review_command.command}: {e}"
            raise ReviewLaunchError(msg) from e
