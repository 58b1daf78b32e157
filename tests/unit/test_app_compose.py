from __future__ import annotations

import sys

import pytest
from adapters.dx_capture.mss import MSSCapture
from adapters.image_png.pillow import PillowPngWriter
from ports.image import ImageWriterPort

from apps.shot.compose import build_capture, build_platform, build_writer
from apps.shot.settings import ShotSettings


def test_build_capture_mss():
    cap = build_capture(ShotSettings())
    assert isinstance(cap, MSSCapture)


def test_build_capture_unknown_adapter():
    settings = ShotSettings()
    settings.capture.adapter = "dxcam"  # type: ignore[assignment]
    with pytest.raises(ValueError, match="dxcam"):
        build_capture(settings)


def test_build_writer_uses_compress_level():
    writer = build_writer(ShotSettings(png_compress_level=3))
    assert isinstance(writer, PillowPngWriter)
    assert isinstance(writer, ImageWriterPort)


def test_png_writer_rejects_bad_level():
    with pytest.raises(ValueError):
        PillowPngWriter(compress_level=10)


@pytest.mark.skipif(sys.platform == "win32", reason="checks the non-Windows path")
def test_platform_ports_need_windows():
    with pytest.raises(RuntimeError, match="Windows"):
        build_platform()
