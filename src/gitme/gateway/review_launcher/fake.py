"""Fake ReviewLauncher implementation for testing."""

from gitme.gateway.review_launcher.abc import ReviewCommand, ReviewLauncher, ReviewLaunchError


class FakeReviewLauncher(ReviewLauncher):
    """In-memory fake that captures review commands without spawning processes."""

    def __init__(self, *, fail_with: str | None = None) -> None:
        """Create the fake.

        Args:
            fail_with: When set, launch() raises ReviewLaunchError with this message
        """
        self._launched: list[ReviewCommand] = []
        self._fail_with = fail_with

    def launch(self, review_command: ReviewCommand) -> None:
        if self._fail_with is not None:
            raise ReviewLaunchError(self._fail_with)
        self._launched.append(review_command)

    @property
    def launched(self) -> list[ReviewCommand]:
        """Review commands passed to launch(), in order.

        This property is for test assertions only.
        """
        return self._launched
