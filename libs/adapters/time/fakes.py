from __future__ import annotations

from ports.time import ClockPort, SleeperPort


class StepClock(ClockPort):
    """Advances by a fixed step on every read, so timings are deterministic."""

    def __init__(self, start: float = 0.0, step: float = 0.001) -> None:
        self._t = float(start)
        self._step = float(step)

    def now(self) -> float:
        t = self._t
        self._t += self._step
        return t


class RecordingSleeper(SleeperPort):
    """Records requested waits without blocking."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.calls.append(float(seconds))
