# libs/domain/shot/alpha.py
"""
Alpha reconstruction from two exposures of the same frame.

A translucent source pixel (C, a) shown over a white backdrop reads back as
``light = C*a + 255*(1 - a)`` and over a black backdrop as ``dark = C*a``.
Two observations give two equations, so both unknowns can be recovered:

    a = 255 - (light - dark)                  (averaged over B, G, R)
    C = (light + a - 255) * 255 / a

Inputs are BGRX frames as returned by the capture port; the output is RGBA.
"""
from __future__ import annotations

import numpy as np

__all__ = ["reconstruct_alpha"]


def _check_buffer(name: str, buf: bytes | bytearray | memoryview, size: int) -> None:
    if len(buf) < size:
        raise ValueError(f"{name} buffer holds {len(buf)} bytes, need {size}")


def reconstruct_alpha(
    light: bytearray,
    dark: bytes | bytearray,
    width: int,
    height: int,
    *,
    rows_per_chunk: int = 256,
) -> bytearray:
    """Consume ``light`` and return it rewritten in place as RGBA.

    ``light`` is the exposure over white, ``dark`` the exposure over black;
    both are BGRX, row-major, ``width*height*4`` bytes (extra trailing bytes
    are never read). ``dark`` is only read. The returned object *is*
    ``light``: callers must not keep using it as a BGRX frame.

    Pixels with no recoverable alpha become (0, 0, 0, 0). Colours and alpha
    are clamped to [0, 255], so inconsistent pairs never wrap.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid size {width}x{height}")
    if rows_per_chunk <= 0:
        raise ValueError("rows_per_chunk must be positive")
    if not isinstance(light, bytearray):
        raise TypeError("light buffer must be a writable bytearray")

    size = width * height * 4
    _check_buffer("light", light, size)
    _check_buffer("dark", dark, size)

    out = np.frombuffer(light, dtype=np.uint8, count=size).reshape(height, width, 4)
    ref = np.frombuffer(dark, dtype=np.uint8, count=size).reshape(height, width, 4)

    # Bands are independent; chunking keeps the int32 temporaries small on
    # large virtual screens.
    for top in range(0, height, rows_per_chunk):
        bottom = min(top + rows_per_chunk, height)
        _reconstruct_band(out[top:bottom], ref[top:bottom])

    return light


def _reconstruct_band(out: np.ndarray, ref: np.ndarray) -> None:
    lit = out[..., :3].astype(np.int32)  # B, G, R over white
    blk = ref[..., :3].astype(np.int32)  # B, G, R over black

    alpha = (blk - lit + 255).sum(axis=-1) // 3
    np.minimum(alpha, 255, out=alpha)
    visible = alpha > 0

    divisor = np.where(visible, alpha, 1)[..., np.newaxis]
    color = (lit + divisor - 255) * 255 // divisor
    np.clip(color, 0, 255, out=color)

    out[..., 0] = color[..., 2]
    out[..., 1] = color[..., 1]
    out[..., 2] = color[..., 0]
    out[..., 3] = alpha
    out[~visible] = 0
