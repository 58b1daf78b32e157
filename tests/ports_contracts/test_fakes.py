from __future__ import annotations

from pathlib import Path

from adapters.dx_capture import FakeDesktop, FakeScreenCapturePort, over
from adapters.image_png import MemoryImageWriter
from adapters.time import RecordingSleeper, StepClock, SystemClock, SystemSleeper
from adapters.win_shield import FakeCompositor, FakeShieldFactory
from domain.types import RGBAImage
from ports.compositor import CompositorPort
from ports.surface import ShieldFactoryPort, ShieldPort
from ports.vision import Rect


def test_over_matches_source_over_formula():
    assert over((255, 0, 0, 255), (0, 0, 0)) == (255, 0, 0)
    assert over((0, 0, 0, 0), (12, 34, 56)) == (12, 34, 56)
    assert over((255, 255, 255, 128), (0, 0, 0)) == (128, 128, 128)


def test_capture_fake_returns_bgrx_frames():
    desktop = FakeDesktop.solid(Rect(5, 5, 3, 2), (10, 20, 30, 255))
    cap = FakeScreenCapturePort(desktop)
    cap.open()
    frame = cap.grab_rect(Rect(5, 5, 3, 2))
    assert frame.size() == (3, 2)
    assert len(frame.bgra) == 3 * 2 * 4
    assert tuple(frame.bgra[:4]) == (30, 20, 10, 255)
    assert cap.grabs == [Rect(5, 5, 3, 2)]
    cap.close()
    assert cap.opened is False


def test_capture_outside_layer_sees_wallpaper():
    desktop = FakeDesktop.solid(Rect(0, 0, 1, 1), (0, 0, 0, 255))
    frame = FakeScreenCapturePort(desktop).grab_rect(Rect(1, 0, 1, 1))
    r, g, b = desktop.wallpaper
    assert tuple(frame.bgra[:3]) == (b, g, r)


def test_shield_changes_wait_for_flush():
    desktop = FakeDesktop.solid(Rect(0, 0, 1, 1), (0, 0, 0, 0))
    factory = FakeShieldFactory(desktop)
    compositor = FakeCompositor(desktop)
    cap = FakeScreenCapturePort(desktop)
    rect = desktop.layer_rect

    shield = factory.create(rect, (255, 255, 255))
    assert isinstance(factory, ShieldFactoryPort)
    assert isinstance(shield, ShieldPort)
    assert isinstance(compositor, CompositorPort)

    compositor.flush()
    assert tuple(cap.grab_rect(rect).bgra[:3]) == (255, 255, 255)

    shield.set_background((0, 0, 0))
    shield.redraw()
    assert tuple(cap.grab_rect(rect).bgra[:3]) == (255, 255, 255)  # not yet presented
    compositor.flush()
    assert tuple(cap.grab_rect(rect).bgra[:3]) == (0, 0, 0)
    assert compositor.flushes == 2

    shield.destroy()
    shield.destroy()  # idempotent
    assert desktop.surfaces == []


def test_memory_writer_keeps_bytes():
    writer = MemoryImageWriter()
    img = RGBAImage(width=1, height=1, rgba=bytearray(b"\x01\x02\x03\x04"))
    p = writer.write(img, Path("x.png"))
    assert writer.written[p] == b"\x01\x02\x03\x04"
    assert writer.sizes[p] == (1, 1)


def test_time_ports():
    clk = StepClock(start=1.0, step=0.5)
    assert clk.now() == 1.0
    assert clk.now() == 1.5

    slp = RecordingSleeper()
    slp.sleep(2)
    assert slp.calls == [2.0]

    sys_clk = SystemClock()
    t1 = sys_clk.now()
    SystemSleeper().sleep(0.01)
    SystemSleeper().sleep(0)  # no-op
    assert sys_clk.now() >= t1
