# tests/e2e/test_shot_smoke.py
from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from adapters.dx_capture import FakeDesktop, FakeScreenCapturePort
from adapters.image_png.pillow import PillowPngWriter
from adapters.time import RecordingSleeper, StepClock
from adapters.win_shield import FakeCompositor, FakeShieldFactory
from domain.shot import ShotService
from PIL import Image

from apps.shot.compose import ShotApp
from apps.shot.settings import ShotSettings

pytestmark = pytest.mark.e2e


def _app(desktop: FakeDesktop, settings: ShotSettings) -> ShotApp:
    capture = FakeScreenCapturePort(desktop)
    clock = StepClock()
    service = ShotService(
        capture, FakeCompositor(desktop), FakeShieldFactory(desktop), clock=clock
    )
    return ShotApp(
        settings=settings,
        capture=capture,
        service=service,
        writer=PillowPngWriter(compress_level=settings.png_compress_level),
        clock=clock,
        sleeper=RecordingSleeper(),
    )


def test_shot_smoke_writes_translucent_png(tmp_path: Path):
    desktop = FakeDesktop.from_rows(
        0,
        0,
        [
            [(255, 0, 0, 255), (0, 0, 0, 0), (0, 128, 255, 64)],
            [(0, 255, 0, 255), (255, 255, 255, 128), (0, 0, 0, 0)],
        ],
    )
    settings = ShotSettings(output_dir=tmp_path, png_compress_level=1)
    app = _app(desktop, settings)

    report = app.run(now=datetime(2024, 5, 6, 7, 8, 9))

    path = Path(report.path)
    assert path == tmp_path / "screenshot_2024-05-06_07-08-09.png"
    assert (report.width, report.height) == (3, 2)
    assert report.opaque_pixels == 2
    assert report.transparent_pixels == 2
    assert report.translucent_pixels == 2
    assert report.elapsed_s > 0

    with Image.open(path) as im:
        assert im.mode == "RGBA"
        assert im.size == (3, 2)
        assert im.getpixel((0, 0)) == (255, 0, 0, 255)
        assert im.getpixel((1, 0)) == (0, 0, 0, 0)
        r, g, b, a = im.getpixel((1, 1))
        assert abs(a - 128) <= 1
        assert min(r, g, b) >= 254

    assert desktop.surfaces == []
    assert app.capture.opened is False  # type: ignore[attr-defined]
