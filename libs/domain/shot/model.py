from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ports.vision import Rect

ShotState = Literal[
    "INIT",
    "SETTLE_LIGHT",
    "CAPTURE_LIGHT",
    "SWAP_BACKGROUND",
    "SETTLE_DARK",
    "CAPTURE_DARK",
    "TEARDOWN",
    "RECONSTRUCT",
    "DONE",
]

# Strict order; there is no branching and no re-entry.
SHOT_SEQUENCE: tuple[ShotState, ...] = (
    "INIT",
    "SETTLE_LIGHT",
    "CAPTURE_LIGHT",
    "SWAP_BACKGROUND",
    "SETTLE_DARK",
    "CAPTURE_DARK",
    "TEARDOWN",
    "RECONSTRUCT",
    "DONE",
)


@dataclass
class ShotContext:
    rect: Rect
    state: ShotState | None = None
    trace: list[ShotState] = field(default_factory=list)
    started_at: float | None = None
    timings: dict[str, float] = field(default_factory=dict)  # state -> seconds spent
    _entered_at: float = field(default=0.0, repr=False)

    def enter(self, state: ShotState, now: float) -> None:
        if self.state is not None:
            self.timings[self.state] = now - self._entered_at
        self.state = state
        self.trace.append(state)
        self._entered_at = now
        if self.started_at is None:
            self.started_at = now

    def elapsed(self, now: float) -> float:
        return 0.0 if self.started_at is None else now - self.started_at
