"""Production clock."""

import time
from datetime import datetime

from gitme.gateway.time.abc import Time


class RealTime(Time):
    def monotonic(self) -> float:
        return time.monotonic()

    def now(self) -> datetime:
        return datetime.now().astimezone()
