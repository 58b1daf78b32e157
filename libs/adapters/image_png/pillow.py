from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from PIL import Image

from ports.image import ImageWriterPort, RGBAImageLike

LOG: Final = logging.getLogger("clearshot.png")


class PillowPngWriter(ImageWriterPort):
    """Lossless RGBA PNG; rows are written top row first."""

    def __init__(self, compress_level: int = 9) -> None:
        if not 0 <= compress_level <= 9:
            raise ValueError(f"compress_level must be 0..9, got {compress_level}")
        self._compress_level = compress_level

    def write(self, image: RGBAImageLike, path: Path) -> Path:
        path = Path(path)
        size = image.width * image.height * 4
        img = Image.frombuffer(
            "RGBA", (image.width, image.height), bytes(image.rgba[:size]), "raw", "RGBA", 0, 1
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            img.save(path, format="PNG", compress_level=self._compress_level)
        except OSError as e:
            raise RuntimeError(f"Couldn't write PNG: {path}") from e
        LOG.debug("wrote %s (%dx%d)", path, image.width, image.height)
        return path
