import time
from src.app.services.clock import Clock


class SystemClock(Clock):
    """Wall clock in UTC epoch seconds, never going backwards within a process"""

    def __init__(self):
        self._last = 0

    def now(self) -> int:
        self._last = max(self._last, int(time.time()))
        return self._last
