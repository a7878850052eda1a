"""Fake clock for testing."""

from datetime import UTC, datetime, timedelta

from gitme.gateway.time.abc import Time


class FakeTime(Time):
    """Clock that only moves when advance() is called."""

    def __init__(self, *, start: datetime | None = None, monotonic_start: float = 1000.0) -> None:
        self._now = start or datetime(2024, 1, 15, 14, 30, tzinfo=UTC)
        self._monotonic = monotonic_start

    def monotonic(self) -> float:
        return self._monotonic

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move both clocks forward by `seconds`."""
        self._monotonic += seconds
        self._now += timedelta(seconds=seconds)
