from .compositor import CompositorPort
from .image import ImageWriterPort
from .surface import BLACK, WHITE, Color, ShieldFactoryPort, ShieldPort, ShotError, SurfaceError
from .time import ClockPort, SleeperPort
from .vision import ROI, CapturePort, Frame, Rect

__all__ = [
    "CapturePort",
    "Frame",
    "Rect",
    "ROI",
    "CompositorPort",
    "ShieldPort",
    "ShieldFactoryPort",
    "Color",
    "WHITE",
    "BLACK",
    "ShotError",
    "SurfaceError",
    "ImageWriterPort",
    "ClockPort",
    "SleeperPort",
]
