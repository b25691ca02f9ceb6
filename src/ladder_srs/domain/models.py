"""
Domain models for item progress and reviews.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime

from .constants import CORRECT_THRESHOLD, DEFAULT_EASE_FACTOR
from .stages import Stage, StageGroup


@dataclass(frozen=True)
class ItemProgressState:
    """
    Progress of one learner on one learnable item.

    Attributes:
        stage: Ladder position, 0 (New) to 9 (Burned).
        ease_factor: SM-2 ease, never below 1.3.
        repetitions: Consecutive correct reviews since the last lapse.
        interval_days: Interval computed by the last review (informational only).
        next_review_at: When the item becomes due; None if never scheduled.
        last_reviewed_at: When the last review was processed.
        burned_at: When the item first reached Burned.
        item_id: Caller's identifier, carried through untouched.
    """

    stage: int
    ease_factor: float = DEFAULT_EASE_FACTOR
    repetitions: int = 0
    interval_days: float = 0.0
    next_review_at: datetime | None = None
    last_reviewed_at: datetime | None = None
    burned_at: datetime | None = None
    item_id: str | None = None


@dataclass(frozen=True)
class ReviewEvent:
    """
    One graded review of an item.

    ``interval`` mirrors the stored state but is never read: the next
    interval comes from the new stage alone.
    """

    quality: int
    current_stage: int
    ease_factor: float
    repetitions: int
    interval: float | None = None

    @property
    def is_correct(self) -> bool:
        return self.quality >= CORRECT_THRESHOLD

    @classmethod
    def from_state(cls, state: ItemProgressState, quality: int) -> "ReviewEvent":
        return cls(
            quality=quality,
            current_stage=state.stage,
            ease_factor=state.ease_factor,
            repetitions=state.repetitions,
            interval=state.interval_days,
        )


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of processing a ReviewEvent."""

    previous_stage: int
    new_stage: int
    new_ease_factor: float
    new_interval_days: float
    new_repetitions: int
    next_review_at: datetime
    reviewed_at: datetime
    was_correct: bool

    @property
    def burned(self) -> bool:
        return self.new_stage == Stage.BURNED


@dataclass(frozen=True)
class ReviewHistoryRecord:
    """Immutable log entry the persistence layer appends after each review."""

    previous_stage: int
    new_stage: int
    quality: int
    was_correct: bool
    reviewed_at: datetime
    item_id: str | None = None


@dataclass
class StageSummary:
    """
    Stage distribution over a learner's items.

    ``stage_counts`` is keyed by display name and always holds all ten stages;
    ``group_counts`` partitions the same items into the six named groups.
    """

    stage_counts: dict[str, int] = field(default_factory=dict)
    group_counts: dict[StageGroup, int] = field(default_factory=dict)
    total: int = 0
