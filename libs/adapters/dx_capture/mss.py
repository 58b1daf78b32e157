from __future__ import annotations

import logging
from typing import Any, Final, cast

try:
    import mss  # type: ignore
except Exception:  # pragma: no cover
    mss = None

from ports.vision import CapturePort, Frame, Rect

LOG: Final = logging.getLogger("clearshot.capture")


class MSSCapture(CapturePort):
    """Screen grabs via mss (GDI BitBlt with CAPTUREBLT on Windows).

    Frames are BGRA, top row first, so both exposures of a shot share one
    orientation.
    """

    def __init__(self) -> None:
        self._sct: Any | None = None

    def open(self) -> None:
        if mss is None:
            raise RuntimeError("mss is not installed")
        if self._sct is None:
            # newer releases deprecate mss.mss in favour of mss.MSS
            factory = getattr(mss, "MSS", None) or mss.mss
            self._sct = factory()

    def screen_rect(self, monitor: int = 0) -> Rect:
        self.open()
        assert self._sct is not None
        monitors = self._sct.monitors  # has attribute at runtime
        # monitors[0] is the whole virtual screen; clamp unknown indexes to it
        idx = int(monitor)
        if idx < 0 or idx >= len(monitors):
            LOG.warning("monitor %d not found (have %d), using virtual screen", idx, len(monitors) - 1)
            idx = 0
        mon = cast(dict[str, int], dict(monitors[idx]))
        return Rect(
            left=int(mon["left"]),
            top=int(mon["top"]),
            width=int(mon["width"]),
            height=int(mon["height"]),
        )

    def grab_rect(self, rect: Rect) -> Frame:
        self.open()
        assert self._sct is not None
        shot: Any = self._sct.grab(rect.as_mss())
        # Prefer BGRA if available; fall back to raw
        if hasattr(shot, "bgra"):
            bgra = bytearray(shot.bgra)
        else:
            bgra = bytearray(shot.raw)
        return Frame(width=shot.width, height=shot.height, bgra=bgra)

    def close(self) -> None:
        if self._sct is not None:
            try:
                self._sct.close()
            except Exception as e:
                LOG.debug("mss close failed: %r", e)
        self._sct = None
