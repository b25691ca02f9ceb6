# Domain Package
from .errors import (
    InvalidEaseFactorError,
    InvalidRepetitionsError,
    InvalidStageError,
    InvalidTimestampError,
    SrsError,
)
from .models import (
    ItemProgressState,
    ReviewEvent,
    ReviewHistoryRecord,
    ReviewOutcome,
    StageSummary,
)
from .ports import Clock, FixedClock, SystemClock
from .stages import Stage, StageInterval

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "ItemProgressState",
    "ReviewEvent",
    "ReviewHistoryRecord",
    "ReviewOutcome",
    "StageSummary",
    "Stage",
    "StageInterval",
    "SrsError",
    "InvalidStageError",
    "InvalidEaseFactorError",
    "InvalidRepetitionsError",
    "InvalidTimestampError",
]
