"""Tests for the stage-ladder SM-2 review processor."""

from datetime import datetime, timedelta

import pytest

from ladder_srs.application.review_processor import (
    ReviewProcessor,
    apply_review,
    new_item_state,
    process_review,
    quality_from_correctness,
)
from ladder_srs.domain.errors import (
    InvalidEaseFactorError,
    InvalidRepetitionsError,
    InvalidStageError,
    InvalidTimestampError,
)
from ladder_srs.domain.models import ItemProgressState, ReviewEvent
from ladder_srs.domain.stages import Stage


def event(quality, stage, ease=2.5, reps=0, interval=None):
    return ReviewEvent(
        quality=quality,
        current_stage=stage,
        ease_factor=ease,
        repetitions=reps,
        interval=interval,
    )


class TestStageTransitions:
    @pytest.mark.parametrize("stage", range(1, 10))
    @pytest.mark.parametrize("quality", [3, 4, 5])
    def test_correct_advances_one_stage(self, now, stage, quality):
        outcome = process_review(event(quality, stage), now)
        assert outcome.new_stage == min(stage + 1, 9)

    @pytest.mark.parametrize("stage", range(1, 5))
    @pytest.mark.parametrize("quality", [0, 1, 2])
    def test_apprentice_lapse_drops_one(self, now, stage, quality):
        outcome = process_review(event(quality, stage), now)
        assert outcome.new_stage == max(stage - 1, 1)

    @pytest.mark.parametrize("stage", range(5, 10))
    @pytest.mark.parametrize("quality", [0, 1, 2])
    def test_guru_and_above_lapse_drops_two(self, now, stage, quality):
        outcome = process_review(event(quality, stage), now)
        assert outcome.new_stage == max(stage - 2, 1)

    def test_apprentice_one_lapse_stays_at_floor(self, now):
        outcome = process_review(event(1, 1), now)
        assert outcome.new_stage == 1

    def test_new_item_lapse_lands_on_apprentice_one(self, now):
        outcome = process_review(event(1, 0), now)
        assert outcome.new_stage == Stage.APPRENTICE_1

    def test_burned_correct_stays_burned(self, now):
        outcome = process_review(event(5, 9), now)
        assert outcome.new_stage == 9


class TestEaseAndRepetitions:
    @pytest.mark.parametrize(
        "quality,expected",
        [(5, 2.6), (4, 2.5), (3, 2.36)],
    )
    def test_sm2_ease_update(self, now, quality, expected):
        outcome = process_review(event(quality, 3, ease=2.5), now)
        assert outcome.new_ease_factor == pytest.approx(expected)

    def test_lapse_penalty_is_flat(self, now):
        for quality in (0, 1, 2):
            outcome = process_review(event(quality, 3, ease=2.5), now)
            assert outcome.new_ease_factor == pytest.approx(2.3)

    def test_ease_floor_on_lapse(self, now):
        outcome = process_review(event(1, 4, ease=1.3), now)
        assert outcome.new_ease_factor == 1.3

    def test_ease_floor_on_low_quality_correct(self, now):
        outcome = process_review(event(3, 4, ease=1.35), now)
        assert outcome.new_ease_factor == 1.3

    @pytest.mark.parametrize("quality", range(0, 6))
    @pytest.mark.parametrize("ease", [0.0, 1.0, 1.3, 1.4, 2.5, 4.0])
    def test_ease_never_below_minimum(self, now, quality, ease):
        outcome = process_review(event(quality, 5, ease=ease), now)
        assert outcome.new_ease_factor >= 1.3

    def test_correct_increments_repetitions(self, now):
        assert process_review(event(5, 2, reps=3), now).new_repetitions == 4

    def test_lapse_resets_repetitions(self, now):
        assert process_review(event(2, 7, reps=12), now).new_repetitions == 0


class TestScheduling:
    def test_next_review_from_new_stage_interval(self, now):
        outcome = process_review(event(5, 4), now)
        assert outcome.new_interval_days == 7.0
        assert outcome.next_review_at == now + timedelta(days=7)

    def test_stored_interval_is_ignored(self, now):
        a = process_review(event(5, 5, interval=14.0), now)
        b = process_review(event(5, 5, interval=999.0), now)
        assert a.new_interval_days == b.new_interval_days == 14.0
        assert a.next_review_at == b.next_review_at

    def test_ease_does_not_scale_interval(self, now):
        low = process_review(event(5, 6, ease=1.3), now)
        high = process_review(event(5, 6, ease=3.5), now)
        assert low.next_review_at == high.next_review_at

    def test_burning_schedules_nothing(self, now):
        outcome = process_review(event(5, 8), now)
        assert outcome.new_stage == Stage.BURNED
        assert outcome.new_interval_days == 0
        assert outcome.next_review_at == now
        assert outcome.burned

    @pytest.mark.parametrize("stage", range(0, 9))
    def test_next_review_not_before_now(self, now, stage):
        for quality in (1, 5):
            assert process_review(event(quality, stage), now).next_review_at >= now


class TestScenarios:
    def test_new_item_answered_perfectly(self, now):
        outcome = process_review(event(5, 1, ease=2.5, reps=0), now)
        assert outcome.new_stage == 2
        assert outcome.new_repetitions == 1
        assert outcome.new_ease_factor == pytest.approx(2.6)
        assert outcome.next_review_at == now + timedelta(hours=8)

    def test_guru_two_lapse(self, now):
        outcome = process_review(event(1, 6, ease=2.2, reps=5), now)
        assert outcome.new_stage == 4
        assert outcome.new_repetitions == 0
        assert outcome.new_ease_factor == pytest.approx(2.0)
        assert outcome.next_review_at == now + timedelta(hours=48)
        assert outcome.new_interval_days == 2.0
        assert not outcome.was_correct

    def test_enlightened_burns(self, now):
        outcome = process_review(event(5, 8), now)
        assert outcome.new_stage == 9
        assert outcome.new_interval_days == 0


class TestValidation:
    @pytest.mark.parametrize("stage", [-1, 10])
    def test_invalid_stage(self, now, stage):
        with pytest.raises(InvalidStageError):
            process_review(event(5, stage), now)

    @pytest.mark.parametrize("ease", [-0.1, None, float("nan"), "2.5"])
    def test_invalid_ease(self, now, ease):
        with pytest.raises(InvalidEaseFactorError):
            process_review(event(5, 3, ease=ease), now)

    @pytest.mark.parametrize("reps", [-1, None, 1.5, True])
    def test_invalid_repetitions(self, now, reps):
        with pytest.raises(InvalidRepetitionsError):
            process_review(event(5, 3, reps=reps), now)

    def test_naive_now_rejected(self):
        with pytest.raises(InvalidTimestampError):
            process_review(event(5, 3), datetime(2024, 5, 1, 12, 0))

    def test_quality_not_range_checked(self, now):
        # Out-of-scale quality still follows the formula
        outcome = process_review(event(6, 3, ease=2.5), now)
        assert outcome.new_stage == 4
        assert outcome.new_ease_factor > 2.5


def test_quality_from_correctness():
    assert quality_from_correctness(True) == 5
    assert quality_from_correctness(False) == 1


def test_new_item_state(now):
    state = new_item_state(now, item_id="vocab-mizu")
    assert state.stage == Stage.APPRENTICE_1
    assert state.ease_factor == 2.5
    assert state.repetitions == 0
    assert state.next_review_at == now + timedelta(hours=4)
    assert state.last_reviewed_at is None
    assert state.item_id == "vocab-mizu"


class TestApplyReview:
    def test_updates_state_and_builds_record(self, now):
        state = ItemProgressState(stage=3, ease_factor=2.5, repetitions=2, item_id="k1")
        new_state, record = apply_review(state, 5, now)

        assert new_state.stage == 4
        assert new_state.repetitions == 3
        assert new_state.last_reviewed_at == now
        assert new_state.next_review_at == now + timedelta(hours=48)
        assert new_state.item_id == "k1"
        assert state.stage == 3  # input untouched

        assert record.previous_stage == 3
        assert record.new_stage == 4
        assert record.quality == 5
        assert record.was_correct
        assert record.reviewed_at == now
        assert record.item_id == "k1"

    def test_sets_burned_at_once(self, now):
        state = ItemProgressState(stage=8, ease_factor=2.5)
        burned, _ = apply_review(state, 5, now)
        assert burned.burned_at == now

        later = now + timedelta(days=3)
        again, _ = apply_review(burned, 5, later)
        assert again.burned_at == now

    def test_milestone_logged(self, now, caplog):
        state = ItemProgressState(stage=4, ease_factor=2.5, item_id="k9")
        with caplog.at_level("INFO", logger="ladder_srs.application.review_processor"):
            apply_review(state, 5, now)
        assert "k9 reached Guru I" in caplog.text


class TestReviewProcessor:
    def test_uses_injected_clock(self, clock, now):
        processor = ReviewProcessor(clock=clock)
        outcome = processor.process(event(5, 1))
        assert outcome.reviewed_at == now

        clock.advance(hours=1)
        assert processor.process(event(5, 1)).reviewed_at == now + timedelta(hours=1)

    def test_introduce_then_answer(self, clock, now):
        processor = ReviewProcessor(clock=clock)
        state = processor.introduce("g-wa")
        assert state.next_review_at == now + timedelta(hours=4)

        clock.advance(hours=4)
        state, record = processor.answer(state, was_correct=False)
        assert state.stage == 1
        assert state.ease_factor == pytest.approx(2.3)
        assert record.quality == 1
        assert not record.was_correct

    def test_default_clock_is_aware(self):
        outcome = ReviewProcessor().process(event(5, 1))
        assert outcome.reviewed_at.tzinfo is not None
