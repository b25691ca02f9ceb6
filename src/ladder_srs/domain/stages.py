"""
The stage ladder.

An immutable, ordinal-indexed table binding each stage (0-9) to its wait
interval, display name and display color. All hour/day arithmetic lives here
so the review processor never has to know which unit a stage uses.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import IntEnum
from typing import Literal

from .constants import HOURS_PER_DAY
from .errors import InvalidStageError

IntervalUnit = Literal["hours", "days"]
StageGroup = Literal["new", "apprentice", "guru", "master", "enlightened", "burned"]


class Stage(IntEnum):
    NEW = 0
    APPRENTICE_1 = 1
    APPRENTICE_2 = 2
    APPRENTICE_3 = 3
    APPRENTICE_4 = 4
    GURU_1 = 5
    GURU_2 = 6
    MASTER = 7
    ENLIGHTENED = 8
    BURNED = 9


@dataclass(frozen=True)
class StageInterval:
    """
    Wait before the next review.

    Attributes:
        value: Magnitude, 0 for New and Burned.
        unit: "hours" for the Apprentice range, "days" above it.
    """

    value: int
    unit: IntervalUnit

    @property
    def hours(self) -> float:
        if self.unit == "hours":
            return float(self.value)
        return float(self.value * HOURS_PER_DAY)

    @property
    def days(self) -> float:
        return self.hours / HOURS_PER_DAY

    def as_timedelta(self) -> timedelta:
        return timedelta(hours=self.hours)


@dataclass(frozen=True)
class StageDefinition:
    stage: Stage
    name: str
    interval: StageInterval
    group: StageGroup
    color: str


_STAGE_TABLE: tuple[StageDefinition, ...] = (
    StageDefinition(Stage.NEW, "New", StageInterval(0, "hours"), "new", "#A0A0A0"),
    StageDefinition(Stage.APPRENTICE_1, "Apprentice I", StageInterval(4, "hours"), "apprentice", "#DD0093"),
    StageDefinition(Stage.APPRENTICE_2, "Apprentice II", StageInterval(8, "hours"), "apprentice", "#DD0093"),
    StageDefinition(Stage.APPRENTICE_3, "Apprentice III", StageInterval(24, "hours"), "apprentice", "#DD0093"),
    StageDefinition(Stage.APPRENTICE_4, "Apprentice IV", StageInterval(48, "hours"), "apprentice", "#DD0093"),
    StageDefinition(Stage.GURU_1, "Guru I", StageInterval(7, "days"), "guru", "#882D9E"),
    StageDefinition(Stage.GURU_2, "Guru II", StageInterval(14, "days"), "guru", "#882D9E"),
    StageDefinition(Stage.MASTER, "Master", StageInterval(30, "days"), "master", "#294DDB"),
    StageDefinition(Stage.ENLIGHTENED, "Enlightened", StageInterval(120, "days"), "enlightened", "#FAB819"),
    StageDefinition(Stage.BURNED, "Burned", StageInterval(0, "days"), "burned", "#449944"),
)

STAGE_GROUPS: tuple[StageGroup, ...] = (
    "new",
    "apprentice",
    "guru",
    "master",
    "enlightened",
    "burned",
)

# Entering one of these is worth a reward upstream.
MILESTONE_STAGES = frozenset({Stage.GURU_1, Stage.MASTER, Stage.ENLIGHTENED, Stage.BURNED})


def validate_stage(stage: int) -> Stage:
    """Return ``stage`` as a Stage, raising InvalidStageError if it is not an ordinal 0-9."""
    if isinstance(stage, bool) or not isinstance(stage, int):
        raise InvalidStageError(stage)
    if not Stage.NEW <= stage <= Stage.BURNED:
        raise InvalidStageError(stage)
    return Stage(stage)


def get_definition(stage: int) -> StageDefinition:
    return _STAGE_TABLE[validate_stage(stage)]


def get_interval(stage: int) -> StageInterval:
    return get_definition(stage).interval


def get_name(stage: int) -> str:
    return get_definition(stage).name


def get_color(stage: int) -> str:
    return get_definition(stage).color


def stage_group(stage: int) -> StageGroup:
    return get_definition(stage).group


def interval_days(stage: int) -> float:
    """Interval of ``stage`` in (possibly fractional) days; 0.0 for New and Burned."""
    return get_interval(stage).days


def interval_timedelta(stage: int) -> timedelta:
    return get_interval(stage).as_timedelta()


def all_stages() -> tuple[StageDefinition, ...]:
    return _STAGE_TABLE


def milestone_reached(previous_stage: int, new_stage: int) -> Stage | None:
    """
    Report the milestone stage entered by a transition, if any.

    Only upward moves into Guru I, Master, Enlightened or Burned count; a
    demotion that happens to land on Guru I is not a milestone.
    """
    previous = validate_stage(previous_stage)
    new = validate_stage(new_stage)
    if new > previous and new in MILESTONE_STAGES:
        return new
    return None
