from __future__ import annotations

from abc import ABC, abstractmethod

from .vision import Rect

Color = tuple[int, int, int]  # r, g, b

WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)


class ShotError(RuntimeError):
    """A capture session could not produce an image."""


class SurfaceError(ShotError):
    """The shield surface (or its drawing resources) could not be created."""


class ShieldPort(ABC):
    """Bottom-most, input-transparent surface that paints a solid background."""

    @abstractmethod
    def set_background(self, color: Color) -> None: ...

    @abstractmethod
    def redraw(self) -> None: ...

    @abstractmethod
    def destroy(self) -> None: ...


class ShieldFactoryPort(ABC):
    @abstractmethod
    def create(self, rect: Rect, background: Color) -> ShieldPort:
        """Show a shield covering ``rect``; raises SurfaceError on failure."""
