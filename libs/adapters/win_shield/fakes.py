from __future__ import annotations

from adapters.dx_capture.fakes import FakeDesktop
from ports.compositor import CompositorPort
from ports.surface import Color, ShieldFactoryPort, ShieldPort, SurfaceError
from ports.vision import Rect


class FakeShield(ShieldPort):
    def __init__(self, desktop: FakeDesktop, rect: Rect, background: Color) -> None:
        self._desktop = desktop
        self._surface = desktop.add_surface(rect, background)
        self.rect = rect
        self.background = background
        self.destroyed = False

    def set_background(self, color: Color) -> None:
        self._desktop.events.append("set_background")
        self.background = color
        self._surface.pending = color

    def redraw(self) -> None:
        self._desktop.events.append("redraw")

    def destroy(self) -> None:
        self._desktop.events.append("destroy")
        if not self.destroyed:
            self._desktop.remove_surface(self._surface)
            self.destroyed = True


class FakeShieldFactory(ShieldFactoryPort):
    """Creates shields on a FakeDesktop; ``fail=True`` simulates exhaustion."""

    def __init__(self, desktop: FakeDesktop, fail: bool = False) -> None:
        self.desktop = desktop
        self.fail = fail
        self.created: list[FakeShield] = []

    def create(self, rect: Rect, background: Color) -> FakeShield:
        self.desktop.events.append("create")
        if self.fail:
            raise SurfaceError("Couldn't create window.")
        shield = FakeShield(self.desktop, rect, background)
        self.created.append(shield)
        return shield


class FakeCompositor(CompositorPort):
    def __init__(self, desktop: FakeDesktop) -> None:
        self.desktop = desktop
        self.flushes = 0

    def flush(self) -> None:
        self.flushes += 1
        self.desktop.flush()
