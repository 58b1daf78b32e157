from .fakes import FakeDesktop, FakeScreenCapturePort, over

__all__ = ["FakeDesktop", "FakeScreenCapturePort", "over"]
