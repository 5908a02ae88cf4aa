"""Wall-clock formatting and monotonic millisecond timers."""

from __future__ import annotations

import threading
import time
from datetime import datetime
from typing import Callable, Optional


def _now_ns() -> int:
    return time.monotonic_ns()


class Clock:
    """Formats local wall-clock time and measures monotonic intervals."""

    def __init__(self, wall_clock: Callable[[], datetime] = datetime.now) -> None:
        self._wall_clock = wall_clock
        self._today: Optional[str] = None
        self._lock = threading.Lock()

    def format_time(self, date_sep: str = "/", time_sep: str = ":") -> str:
        """Current local time as ``yyyy/mm/dd HH:MM:SS.mmm``."""
        now = self._wall_clock()
        return (
            f"{now:%Y}{date_sep}{now:%m}{date_sep}{now:%d} "
            f"{now:%H}{time_sep}{now:%M}{time_sep}{now:%S}"
            f".{now.microsecond // 1000:03d}"
        )

    def format_date(self, date_sep: str = "/") -> str:
        """Current local date as ``yyyy/mm/dd``."""
        now = self._wall_clock()
        return f"{now:%Y}{date_sep}{now:%m}{date_sep}{now:%d}"

    def is_new_day(self) -> bool:
        """True once each time the calendar date changes since the last call."""
        current = self.format_date()
        with self._lock:
            if self._today is None:
                self._today = current
                return False
            if current != self._today:
                self._today = current
                return True
            return False

    def time_diff(self, start: int, end: Optional[int] = None) -> int:
        """Milliseconds between two monotonic nanosecond stamps, truncated."""
        if end is None:
            end = _now_ns()
        diff = end - start
        millis = abs(diff) // 1_000_000
        return millis if diff >= 0 else -millis


_CLOCK = Clock()


class Timer:
    """A countdown measured in milliseconds on the monotonic clock."""

    def __init__(self, duration_ms: Optional[int] = None) -> None:
        self._start_ns = 0
        self._duration_ms = 0
        self._started = False
        if duration_ms is not None:
            self.start(duration_ms)

    def start(self, duration_ms: int) -> None:
        self._start_ns = _now_ns()
        self._duration_ms = duration_ms
        self._started = True

    def is_expired(self) -> bool:
        if not self._started:
            return False
        return self.elapsed() >= self._duration_ms

    def reset(self) -> None:
        if self._started:
            self._start_ns = _now_ns()

    def elapsed(self) -> int:
        if not self._started:
            return 0
        return _CLOCK.time_diff(self._start_ns)

    def remaining(self) -> int:
        if not self._started:
            return 0
        return max(self._duration_ms - self.elapsed(), 0)