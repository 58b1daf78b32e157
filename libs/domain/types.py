from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RGBAImage:
    width: int
    height: int
    # R, G, B, A bytes, row-major, same row order as the captured frames
    rgba: bytearray

    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        i = (y * self.width + x) * 4
        r, g, b, a = self.rgba[i : i + 4]
        return r, g, b, a

    def alpha_counts(self) -> tuple[int, int]:
        """Return (fully opaque, fully transparent) pixel counts."""
        alphas = self.rgba[3 : self.width * self.height * 4 : 4]
        return alphas.count(255), alphas.count(0)
