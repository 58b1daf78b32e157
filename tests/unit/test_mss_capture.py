from __future__ import annotations

from types import SimpleNamespace

import pytest
from adapters.dx_capture import mss as mss_adapter
from ports.vision import Rect


class _Shooter:
    monitors = [
        {"left": -1920, "top": 0, "width": 3840, "height": 1080},
        {"left": 0, "top": 0, "width": 1920, "height": 1080},
    ]

    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


def test_open_prefers_mss_class(monkeypatch: pytest.MonkeyPatch):
    def _deprecated():
        raise AssertionError("mss.mss should not be called when mss.MSS exists")

    monkeypatch.setattr(mss_adapter, "mss", SimpleNamespace(MSS=_Shooter, mss=_deprecated))

    cap = mss_adapter.MSSCapture()
    assert cap.screen_rect(0) == Rect(-1920, 0, 3840, 1080)
    assert cap.screen_rect(1) == Rect(0, 0, 1920, 1080)


def test_open_falls_back_to_mss_factory(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(mss_adapter, "mss", SimpleNamespace(mss=_Shooter))

    cap = mss_adapter.MSSCapture()
    cap.open()
    assert cap.screen_rect(7) == Rect(-1920, 0, 3840, 1080)  # unknown index -> virtual screen


def test_open_without_mss(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(mss_adapter, "mss", None)
    with pytest.raises(RuntimeError, match="mss is not installed"):
        mss_adapter.MSSCapture().open()
