"""
Review processor: a modified SM-2 on a fixed stage ladder.

Correct answers (quality >= 3):
  - Move up one stage, capped at Burned.
  - Adjust the ease factor with the classic SM-2 update.

Incorrect answers (quality < 3):
  - Apprentice items (stages 1-4) drop one stage, never below Apprentice I.
  - Guru and above drop two stages, never below Apprentice I.
  - Ease factor drops by a flat 0.2 and repetitions reset to 0.

The next interval is looked up from the new stage; the stored interval and
the ease factor never scale it.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime

from ladder_srs.domain.constants import (
    APPRENTICE_LAPSE_DROP,
    DEFAULT_EASE_FACTOR,
    GURU_LAPSE_DROP,
    LAPSE_EASE_PENALTY,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    QUALITY_CORRECT,
    QUALITY_INCORRECT,
)
from ladder_srs.domain.errors import InvalidEaseFactorError, InvalidRepetitionsError
from ladder_srs.domain.models import (
    ItemProgressState,
    ReviewEvent,
    ReviewHistoryRecord,
    ReviewOutcome,
)
from ladder_srs.domain.ports import Clock, SystemClock
from ladder_srs.domain.stages import (
    Stage,
    get_name,
    interval_days,
    interval_timedelta,
    milestone_reached,
    validate_stage,
)
from ladder_srs.domain.timestamps import require_aware

logger = logging.getLogger(__name__)


def quality_from_correctness(was_correct: bool) -> int:
    """Map a right/wrong answer onto the quality scale (5 or 1)."""
    return QUALITY_CORRECT if was_correct else QUALITY_INCORRECT


def _validate_ease(ease_factor: float) -> float:
    if isinstance(ease_factor, bool) or not isinstance(ease_factor, (int, float)):
        raise InvalidEaseFactorError(ease_factor)
    if math.isnan(ease_factor) or ease_factor < 0:
        raise InvalidEaseFactorError(ease_factor)
    return float(ease_factor)


def _validate_repetitions(repetitions: int) -> int:
    if isinstance(repetitions, bool) or not isinstance(repetitions, int) or repetitions < 0:
        raise InvalidRepetitionsError(repetitions)
    return repetitions


def _sm2_ease_delta(quality: int) -> float:
    # quality=5 -> +0.1, quality=3 -> -0.14
    miss = MAX_QUALITY - quality
    return 0.1 - miss * (0.08 + miss * 0.02)


def _demote(stage: int) -> int:
    drop = APPRENTICE_LAPSE_DROP if stage <= Stage.APPRENTICE_4 else GURU_LAPSE_DROP
    return max(stage - drop, Stage.APPRENTICE_1)


def next_review_time(stage: int, now: datetime) -> datetime:
    """``now`` plus the stage interval; ``now`` itself for New and Burned."""
    delta = interval_timedelta(stage)
    if not delta:
        return now
    return now + delta


def process_review(event: ReviewEvent, now: datetime) -> ReviewOutcome:
    """
    Apply one review to an item's scheduling fields.

    Args:
        event: Quality plus the pre-review stage, ease factor and repetitions.
        now: Instant the review is processed at (timezone-aware).

    Returns:
        ReviewOutcome with the new stage, ease, interval, repetitions and due time.

    Raises:
        InvalidStageError: stage outside [0, 9].
        InvalidEaseFactorError: ease missing, NaN or negative.
        InvalidRepetitionsError: repetitions missing or negative.
        InvalidTimestampError: ``now`` is not an aware datetime.
    """
    current_stage = validate_stage(event.current_stage)
    ease = _validate_ease(event.ease_factor)
    repetitions = _validate_repetitions(event.repetitions)
    require_aware(now)

    if event.is_correct:
        new_stage = min(current_stage + 1, Stage.BURNED)
        new_repetitions = repetitions + 1
        new_ease = ease + _sm2_ease_delta(event.quality)
    else:
        new_stage = _demote(current_stage)
        new_repetitions = 0
        new_ease = ease - LAPSE_EASE_PENALTY

    new_ease = max(new_ease, MIN_EASE_FACTOR)

    logger.debug(
        f"Review q={event.quality}: {get_name(current_stage)} -> {get_name(new_stage)}, "
        f"ease {ease:.2f} -> {new_ease:.2f}"
    )

    return ReviewOutcome(
        previous_stage=int(current_stage),
        new_stage=int(new_stage),
        new_ease_factor=new_ease,
        new_interval_days=interval_days(new_stage),
        new_repetitions=new_repetitions,
        next_review_at=next_review_time(new_stage, now),
        reviewed_at=now,
        was_correct=event.is_correct,
    )


def new_item_state(now: datetime, item_id: str | None = None) -> ItemProgressState:
    """State for an item that was just introduced: Apprentice I, due after its interval."""
    require_aware(now)
    stage = Stage.APPRENTICE_1
    return ItemProgressState(
        stage=int(stage),
        ease_factor=DEFAULT_EASE_FACTOR,
        repetitions=0,
        interval_days=interval_days(stage),
        next_review_at=next_review_time(stage, now),
        item_id=item_id,
    )


def apply_review(
    state: ItemProgressState, quality: int, now: datetime
) -> tuple[ItemProgressState, ReviewHistoryRecord]:
    """
    Process a review against a stored state.

    Returns the state to persist and the history record to append. ``burned_at``
    is set the first time the item reaches Burned and kept afterwards.
    """
    outcome = process_review(ReviewEvent.from_state(state, quality), now)

    burned_at = state.burned_at
    if outcome.burned and burned_at is None:
        burned_at = now

    milestone = milestone_reached(outcome.previous_stage, outcome.new_stage)
    if milestone is not None:
        logger.info(f"Item {state.item_id or '<unnamed>'} reached {get_name(milestone)}")

    new_state = replace(
        state,
        stage=outcome.new_stage,
        ease_factor=outcome.new_ease_factor,
        repetitions=outcome.new_repetitions,
        interval_days=outcome.new_interval_days,
        next_review_at=outcome.next_review_at,
        last_reviewed_at=now,
        burned_at=burned_at,
    )
    record = ReviewHistoryRecord(
        previous_stage=outcome.previous_stage,
        new_stage=outcome.new_stage,
        quality=quality,
        was_correct=outcome.was_correct,
        reviewed_at=now,
        item_id=state.item_id,
    )
    return new_state, record


class ReviewProcessor:
    """
    Review entry point bound to a Clock.

    Stateless apart from the clock; every call returns new values.
    """

    def __init__(self, clock: Clock | None = None):
        """
        Args:
            clock: Source of "now"; defaults to the system UTC clock.
        """
        self._clock = clock or SystemClock()

    def process(self, event: ReviewEvent) -> ReviewOutcome:
        return process_review(event, self._clock.now())

    def introduce(self, item_id: str | None = None) -> ItemProgressState:
        return new_item_state(self._clock.now(), item_id=item_id)

    def apply(
        self, state: ItemProgressState, quality: int
    ) -> tuple[ItemProgressState, ReviewHistoryRecord]:
        return apply_review(state, quality, self._clock.now())

    def answer(
        self, state: ItemProgressState, was_correct: bool
    ) -> tuple[ItemProgressState, ReviewHistoryRecord]:
        """Apply a right/wrong answer using the 5/1 quality convention."""
        return self.apply(state, quality_from_correctness(was_correct))
