from __future__ import annotations

import time

from ports.time import ClockPort, SleeperPort


class SystemClock(ClockPort):
    """Monotonic wall clock (perf_counter)."""

    def now(self) -> float:
        return time.perf_counter()


class SystemSleeper(SleeperPort):
    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)
