from __future__ import annotations

import time
from dataclasses import dataclass


class SystemClock:
    """Wall-clock time, truncated to whole seconds."""

    def now(self) -> int:
        return int(time.time())


@dataclass(frozen=True, slots=True)
class FixedClock:
    """
    Clock frozen at `timestamp`.

    Intended for tests and for replaying a verification "as of" a given
    moment. Use `shifted()` to move time instead of mutating the clock.
    """
    timestamp: int

    def now(self) -> int:
        return self.timestamp

    def shifted(self, seconds: int) -> FixedClock:
        return FixedClock(self.timestamp + seconds)


system_clock = SystemClock()
