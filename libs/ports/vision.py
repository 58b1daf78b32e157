# libs/ports/vision.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

ROI = tuple[int, int, int, int]  # x, y, w, h  (compat alias)


@dataclass(frozen=True)
class Rect:
    """Capture rectangle in virtual-screen coordinates (left/top may be negative)."""

    left: int
    top: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Rect needs a positive size, got {self.width}x{self.height}")

    @classmethod
    def from_roi(cls, roi: ROI) -> Rect:
        x, y, w, h = roi
        return cls(left=int(x), top=int(y), width=int(w), height=int(h))

    @classmethod
    def parse(cls, text: str) -> Rect:
        """Parse "L,T,W,H" (commas or spaces)."""
        parts = [p for p in text.replace(",", " ").split() if p]
        if len(parts) != 4:
            raise ValueError(f"Expected 'left,top,width,height', got {text!r}")
        return cls.from_roi((int(parts[0]), int(parts[1]), int(parts[2]), int(parts[3])))

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def nbytes(self) -> int:
        return self.pixel_count * 4

    def as_mss(self) -> dict[str, int]:
        return {"left": self.left, "top": self.top, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class Frame:
    width: int
    height: int
    # raw BGRA bytes (row-major, top row first). The 4th byte is ignored.
    bgra: bytearray

    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def matches(self, rect: Rect) -> bool:
        return (self.width, self.height) == (rect.width, rect.height) and len(
            self.bgra
        ) >= rect.nbytes


class CapturePort(Protocol):
    def open(self) -> None: ...
    def grab_rect(self, rect: Rect) -> Frame: ...
    def screen_rect(self, monitor: int = 0) -> Rect: ...  # 0 = whole virtual screen
    def close(self) -> None: ...
