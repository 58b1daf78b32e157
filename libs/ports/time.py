from __future__ import annotations

from abc import ABC, abstractmethod


class ClockPort(ABC):
    """Monotonic seconds; used to time the phases of a shot."""

    @abstractmethod
    def now(self) -> float: ...


class SleeperPort(ABC):
    """Blocking wait used for the pre-shot delay."""

    @abstractmethod
    def sleep(self, seconds: float) -> None: ...
