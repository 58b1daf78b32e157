from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Protocol


class RGBAImageLike(Protocol):
    width: int
    height: int
    rgba: bytearray


class ImageWriterPort(ABC):
    """Persists a reconstructed RGBA image."""

    @abstractmethod
    def write(self, image: RGBAImageLike, path: Path) -> Path: ...
