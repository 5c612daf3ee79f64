"""Time source for entity timestamps.

Service code never reads wall-clock time directly; it is handed a Clock.
Timestamps are integer nanoseconds since the Unix epoch.
"""

from __future__ import annotations

import threading
import time
from typing import Protocol


class Clock(Protocol):
    """A source of non-decreasing timestamps."""

    def now(self) -> int:
        """Return the current time in nanoseconds."""
        ...


class SystemClock:
    """Clock backed by the system time, clamped so it never goes backwards."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            self._last = max(self._last, time.time_ns())
            return self._last
