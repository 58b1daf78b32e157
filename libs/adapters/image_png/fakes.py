from __future__ import annotations

from pathlib import Path

from ports.image import ImageWriterPort, RGBAImageLike


class MemoryImageWriter(ImageWriterPort):
    """Keeps written images in memory instead of touching disk."""

    def __init__(self) -> None:
        self.written: dict[Path, bytes] = {}
        self.sizes: dict[Path, tuple[int, int]] = {}

    def write(self, image: RGBAImageLike, path: Path) -> Path:
        path = Path(path)
        self.written[path] = bytes(image.rgba)
        self.sizes[path] = (image.width, image.height)
        return path
