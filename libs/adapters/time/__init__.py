from .fakes import RecordingSleeper, StepClock
from .system import SystemClock, SystemSleeper

__all__ = ["StepClock", "RecordingSleeper", "SystemClock", "SystemSleeper"]
