from __future__ import annotations

from abc import ABC, abstractmethod


class CompositorPort(ABC):
    """Window compositor; domain never calls DwmFlush directly."""

    @abstractmethod
    def flush(self) -> None:
        """Block until pending visual changes are on screen. No timeout."""
