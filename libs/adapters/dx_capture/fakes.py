from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ports.surface import Color
from ports.vision import CapturePort, Frame, Rect

RGBA = tuple[int, int, int, int]


def over(src: RGBA, backdrop: Color) -> tuple[int, int, int]:
    """Source-over onto an opaque backdrop, 8-bit, rounding half up."""
    r, g, b, a = src
    return tuple(  # type: ignore[return-value]
        (c * a + bg * (255 - a) + 127) // 255 for c, bg in zip((r, g, b), backdrop)
    )


@dataclass
class _ShownSurface:
    rect: Rect
    pending: Color
    shown: Color | None = None  # None until the first flush


@dataclass
class FakeDesktop:
    """In-memory compositor: a translucent layer over wallpaper and shields.

    Surface changes stay pending until ``flush()``, so a grab taken before a
    flush sees the previously presented pixels.
    """

    layer_rect: Rect
    layer: list[RGBA]
    wallpaper: Color = (40, 90, 160)
    surfaces: list[_ShownSurface] = field(default_factory=list)
    events: list[str] = field(default_factory=list)

    @classmethod
    def solid(cls, rect: Rect, pixel: RGBA) -> FakeDesktop:
        return cls(layer_rect=rect, layer=[pixel] * rect.pixel_count)

    @classmethod
    def from_rows(cls, left: int, top: int, rows: Sequence[Sequence[RGBA]]) -> FakeDesktop:
        rect = Rect(left=left, top=top, width=len(rows[0]), height=len(rows))
        return cls(layer_rect=rect, layer=[px for row in rows for px in row])

    def add_surface(self, rect: Rect, color: Color) -> _ShownSurface:
        surface = _ShownSurface(rect=rect, pending=color)
        self.surfaces.append(surface)
        return surface

    def remove_surface(self, surface: _ShownSurface) -> None:
        self.surfaces.remove(surface)

    def flush(self) -> None:
        self.events.append("flush")
        for s in self.surfaces:
            s.shown = s.pending

    def _backdrop(self, x: int, y: int) -> Color:
        # surfaces sit below every window but above the wallpaper
        for s in reversed(self.surfaces):
            r = s.rect
            if s.shown is not None and r.left <= x < r.left + r.width and r.top <= y < r.top + r.height:
                return s.shown
        return self.wallpaper

    def _source(self, x: int, y: int) -> RGBA:
        lr = self.layer_rect
        if lr.left <= x < lr.left + lr.width and lr.top <= y < lr.top + lr.height:
            return self.layer[(y - lr.top) * lr.width + (x - lr.left)]
        return (0, 0, 0, 0)

    def render(self, rect: Rect) -> bytearray:
        out = bytearray(rect.nbytes)
        i = 0
        for y in range(rect.top, rect.top + rect.height):
            for x in range(rect.left, rect.left + rect.width):
                r, g, b = over(self._source(x, y), self._backdrop(x, y))
                out[i : i + 4] = bytes((b, g, r, 255))
                i += 4
        return out


class FakeScreenCapturePort(CapturePort):
    """Reads BGRX frames out of a FakeDesktop and records every grab."""

    def __init__(self, desktop: FakeDesktop, fail_on_grab: int | None = None) -> None:
        self.desktop = desktop
        self.grabs: list[Rect] = []
        self.opened = False
        self._fail_on_grab = fail_on_grab  # 1-based grab number that raises

    def open(self) -> None:
        self.opened = True

    def screen_rect(self, monitor: int = 0) -> Rect:
        return self.desktop.layer_rect

    def grab_rect(self, rect: Rect) -> Frame:
        self.grabs.append(rect)
        self.desktop.events.append("grab")
        if self._fail_on_grab is not None and len(self.grabs) == self._fail_on_grab:
            raise RuntimeError("capture failed")
        return Frame(width=rect.width, height=rect.height, bgra=self.desktop.render(rect))

    def close(self) -> None:
        self.opened = False
