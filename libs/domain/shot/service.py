# libs/domain/shot/service.py
from __future__ import annotations

import logging
import threading
from typing import Final

from ports.compositor import CompositorPort
from ports.surface import BLACK, WHITE, Color, ShieldFactoryPort, ShieldPort, ShotError, SurfaceError
from ports.time import ClockPort
from ports.vision import CapturePort, Frame, Rect

from domain.types import RGBAImage

from .alpha import reconstruct_alpha
from .model import ShotContext, ShotState

LOG: Final = logging.getLogger("clearshot.shot")

# Shield window class is process-global, so only one session may run at a time.
_SESSION_LOCK: Final = threading.Lock()


class ShotService:
    """Pure domain service (no OS calls). Drives the two-exposure capture.

    Each step waits on the visual side effect of the previous one, so the
    sequence is fixed: show the shield over white, flush, capture, swap to
    black, flush, capture, tear down, then reconstruct alpha.
    """

    def __init__(
        self,
        capture: CapturePort,
        compositor: CompositorPort,
        shields: ShieldFactoryPort,
        clock: ClockPort,
        light: Color = WHITE,
        dark: Color = BLACK,
    ) -> None:
        self.capture: Final = capture
        self.compositor: Final = compositor
        self.shields: Final = shields
        self.clock: Final = clock
        self.light: Final = light
        self.dark: Final = dark
        self.last_context: ShotContext | None = None

    def shoot(self, rect: Rect) -> RGBAImage:
        """Capture ``rect`` twice and return the reconstructed RGBA image.

        Raises SurfaceError when the shield cannot be created and ShotError
        when the capture port returns frames of the wrong size.
        """
        with _SESSION_LOCK:
            ctx = ShotContext(rect=rect)
            self.last_context = ctx
            light, dark = self._expose(ctx)

            self._step(ctx, "RECONSTRUCT")
            rgba = reconstruct_alpha(light.bgra, dark.bgra, rect.width, rect.height)
            del dark
            image = RGBAImage(width=rect.width, height=rect.height, rgba=rgba)

            self._step(ctx, "DONE")
            LOG.info(
                "shot %dx%d at (%d,%d) in %.3fs",
                rect.width,
                rect.height,
                rect.left,
                rect.top,
                ctx.elapsed(self.clock.now()),
            )
            return image

    def _expose(self, ctx: ShotContext) -> tuple[Frame, Frame]:
        rect = ctx.rect
        self._step(ctx, "INIT")
        try:
            shield = self.shields.create(rect, self.light)
        except SurfaceError:
            raise
        except Exception as e:
            raise SurfaceError(f"Couldn't create shield surface: {e}") from e

        try:
            self._step(ctx, "SETTLE_LIGHT")
            self.compositor.flush()

            self._step(ctx, "CAPTURE_LIGHT")
            light = self._grab(rect, "light")

            self._step(ctx, "SWAP_BACKGROUND")
            shield.set_background(self.dark)
            shield.redraw()

            self._step(ctx, "SETTLE_DARK")
            self.compositor.flush()

            self._step(ctx, "CAPTURE_DARK")
            dark = self._grab(rect, "dark")
        except BaseException:
            self._teardown(ctx, shield, aborting=True)
            raise
        self._teardown(ctx, shield)
        return light, dark

    def _grab(self, rect: Rect, which: str) -> Frame:
        frame = self.capture.grab_rect(rect)
        if not frame.matches(rect):
            raise ShotError(
                f"{which} capture returned {frame.width}x{frame.height} "
                f"({len(frame.bgra)} bytes), expected {rect.width}x{rect.height}"
            )
        return frame

    def _teardown(self, ctx: ShotContext, shield: ShieldPort, aborting: bool = False) -> None:
        self._step(ctx, "TEARDOWN")
        try:
            shield.destroy()
        except Exception:
            if not aborting:
                raise
            # keep the error that aborted the shot
            LOG.exception("shield teardown failed")

    def _step(self, ctx: ShotContext, state: ShotState) -> None:
        ctx.enter(state, self.clock.now())
        LOG.debug("shot state -> %s", state)
