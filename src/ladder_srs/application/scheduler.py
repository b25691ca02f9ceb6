"""
Due-item scheduler.

Filters and orders a learner's item states by due-ness and summarizes their
stage distribution. Pure functions over collections; nothing is mutated.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

from ladder_srs.domain.models import ItemProgressState, StageSummary
from ladder_srs.domain.stages import STAGE_GROUPS, Stage, all_stages, stage_group, validate_stage
from ladder_srs.domain.timestamps import require_aware

logger = logging.getLogger(__name__)


def get_next_review_date(from_date: datetime, interval_days: float) -> datetime:
    return from_date + timedelta(days=interval_days)


def is_due(item: ItemProgressState, now: datetime) -> bool:
    """
    Check whether an item should be reviewed at ``now``.

    New items have not been learned yet and Burned items are done, so neither
    is ever due. Items with no scheduled review are not due either.
    """
    require_aware(now)
    stage = validate_stage(item.stage)
    if stage in (Stage.NEW, Stage.BURNED):
        return False

    if item.next_review_at is None:
        return False

    return item.next_review_at <= now


def get_due_items(
    items: Iterable[ItemProgressState],
    now: datetime,
    limit: int | None = None,
) -> list[ItemProgressState]:
    """
    Return the items due at ``now``, longest-waiting first.

    Args:
        items: Item states for one learner.
        now: Reference instant (timezone-aware).
        limit: Optional cap applied after sorting.

    Returns:
        Due items sorted ascending by next_review_at; ties keep input order.
    """
    require_aware(now)
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    due = [item for item in items if is_due(item, now)]
    due.sort(key=lambda item: item.next_review_at)

    if limit is not None:
        due = due[:limit]

    logger.debug(f"{len(due)} item(s) due at {now.isoformat()}")
    return due


def get_summary(items: Iterable[ItemProgressState]) -> StageSummary:
    """
    Count items per stage and per stage group.

    Every stage and group is present in the result, zero-filled, so an empty
    input yields an all-zero summary.
    """
    definitions = all_stages()
    per_stage = [0] * len(definitions)
    group_counts = {group: 0 for group in STAGE_GROUPS}
    total = 0

    for item in items:
        stage = validate_stage(item.stage)
        per_stage[stage] += 1
        group_counts[stage_group(stage)] += 1
        total += 1

    stage_counts = {d.name: per_stage[d.stage] for d in definitions}
    return StageSummary(stage_counts=stage_counts, group_counts=group_counts, total=total)
