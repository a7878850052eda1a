"""Tests for RealReviewLauncher."""

from pathlib import Path

import pytest

from gitme.gateway.review_launcher.abc import ReviewCommand, ReviewLaunchError
from gitme.gateway.review_launcher.real import RealReviewLauncher


def test_missing_directory_raises(tmp_path: Path) -> None:
    """The checkout must exist before anything is spawned."""
    missing = tmp_path / "nope"
    with pytest.raises(ReviewLaunchError, match="Local path does not exist"):
        RealReviewLauncher().launch(ReviewCommand(command="true", args=(), cwd=str(missing)))


def test_missing_executable_raises(tmp_path: Path) -> None:
    command = ReviewCommand(command="gitme-no-such-command", args=(), cwd=str(tmp_path))
    with pytest.raises(ReviewLaunchError, match="Could not run gitme-no-such-command"):
        RealReviewLauncher().launch(command)
