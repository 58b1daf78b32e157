from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Final

from adapters.time import SystemClock, SystemSleeper
from domain.shot import ShotService
from ports.compositor import CompositorPort
from ports.image import ImageWriterPort
from ports.surface import ShieldFactoryPort
from ports.time import ClockPort, SleeperPort
from ports.vision import CapturePort, Rect
from shared.contracts.v1.shot import ShotReport

from apps.shot.naming import resolve_output
from apps.shot.settings import ShotSettings

LOG: Final = logging.getLogger("clearshot.app")


def build_capture(settings: ShotSettings) -> CapturePort:
    if settings.capture.adapter == "mss":
        from adapters.dx_capture.mss import MSSCapture

        return MSSCapture()
    raise ValueError(f"Unknown capture adapter: {settings.capture.adapter}")


def build_writer(settings: ShotSettings) -> ImageWriterPort:
    from adapters.image_png.pillow import PillowPngWriter

    return PillowPngWriter(compress_level=settings.png_compress_level)


def build_platform() -> tuple[CompositorPort, ShieldFactoryPort]:
    # Win32 only for now; RuntimeError elsewhere
    from adapters.win_shield.win32 import DwmCompositor, Win32ShieldFactory

    return DwmCompositor(), Win32ShieldFactory()


@dataclass
class ShotApp:
    settings: ShotSettings
    capture: CapturePort
    service: ShotService
    writer: ImageWriterPort
    clock: ClockPort = field(default_factory=SystemClock)
    sleeper: SleeperPort = field(default_factory=SystemSleeper)

    def run(
        self,
        rect: Rect | None = None,
        out: str | Path | None = None,
        delay_s: float | None = None,
        now: datetime | None = None,
    ) -> ShotReport:
        """Wait, shoot, write the PNG, and describe the result."""
        delay = self.settings.delay_s if delay_s is None else max(0.0, delay_s)
        if delay > 0:
            LOG.info("waiting %.1fs before the shot", delay)
            self.sleeper.sleep(delay)

        self.capture.open()
        try:
            target = rect or self.capture.screen_rect(self.settings.capture.monitor)
            t0 = self.clock.now()
            image = self.service.shoot(target)
            elapsed = self.clock.now() - t0
        finally:
            self.capture.close()

        path = resolve_output(
            out, self.settings.output_dir, self.settings.filename_pattern, now=now
        )
        written = self.writer.write(image, path)
        opaque, transparent = image.alpha_counts()
        return ShotReport(
            path=str(written),
            left=target.left,
            top=target.top,
            width=target.width,
            height=target.height,
            opaque_pixels=opaque,
            transparent_pixels=transparent,
            elapsed_s=max(0.0, elapsed),
        )


def build_app(settings: ShotSettings) -> ShotApp:
    if settings.dpi_aware:
        from adapters.win_shield.win32 import make_dpi_aware

        make_dpi_aware()

    clock = SystemClock()
    capture = build_capture(settings)
    compositor, shields = build_platform()
    service = ShotService(capture=capture, compositor=compositor, shields=shields, clock=clock)
    return ShotApp(
        settings=settings,
        capture=capture,
        service=service,
        writer=build_writer(settings),
        clock=clock,
    )
