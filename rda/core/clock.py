"""
Clock - time source for auction pricing and deadlines.

Time is whole seconds. The house never reads the wall clock directly;
it asks its clock, so tests and demos can step time by hand.
"""

import threading
import time


class Clock:
    """Monotonic source of the current time, in integer seconds."""

    def now(self) -> int:
        raise NotImplementedError


class SystemClock(Clock):
    """
    Wall-clock seconds that never step backwards.

    If the system clock is adjusted back, the last reported value is
    repeated until real time catches up.
    """

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            self._last = max(self._last, int(time.time()))
            return self._last


class ManualClock(Clock):
    """Clock advanced explicitly by the caller."""

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError("Clock cannot start before 0")
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        if timestamp < self._now:
            raise ValueError(f"Clock cannot go backwards: {timestamp} < {self._now}")
        self._now = timestamp

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("Clock cannot go backwards")
        self._now += seconds
        return self._now
