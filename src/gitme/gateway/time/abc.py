"""Time abstraction so refresh timing can be driven by tests."""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    """Abstract clock."""

    @abstractmethod
    def monotonic(self) -> float:
        """Seconds from a monotonic clock, used for refresh intervals."""
        ...

    @abstractmethod
    def now(self) -> datetime:
        """Current wall-clock time (timezone aware), used for 'last updated'."""
        ...
