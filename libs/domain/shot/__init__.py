from .alpha import reconstruct_alpha
from .model import SHOT_SEQUENCE, ShotContext, ShotState
from .service import ShotService

__all__ = ["ShotService", "ShotContext", "ShotState", "SHOT_SEQUENCE", "reconstruct_alpha"]
