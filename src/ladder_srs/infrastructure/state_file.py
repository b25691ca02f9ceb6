"""
Item-state files for the CLI.

A YAML (or JSON) document holding a list of item states, either at the top
level or under an ``items`` key:

    - id: kanji-water
      stage: 3
      ease_factor: 2.36
      repetitions: 2
      next_review_at: 2024-05-01T09:00:00Z

The engine itself never touches files; this adapter only feeds the CLI.
"""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

import yaml  # type: ignore

from ladder_srs.domain.constants import DEFAULT_EASE_FACTOR
from ladder_srs.domain.errors import SrsError
from ladder_srs.domain.models import ItemProgressState, ReviewOutcome
from ladder_srs.domain.stages import get_name
from ladder_srs.domain.timestamps import parse_timestamp

logger = logging.getLogger(__name__)


class StateFileError(SrsError):
    def __init__(self, path: Path | str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


def _item_from_mapping(raw: Any, index: int, path: Path) -> ItemProgressState:
    if not isinstance(raw, dict):
        raise StateFileError(path, f"item #{index}: expected a mapping, got {type(raw).__name__}")
    if "stage" not in raw:
        raise StateFileError(path, f"item #{index}: missing 'stage'")

    item_id = raw.get("id")
    return ItemProgressState(
        stage=raw["stage"],
        ease_factor=raw.get("ease_factor", DEFAULT_EASE_FACTOR),
        repetitions=raw.get("repetitions", 0),
        interval_days=raw.get("interval_days", 0.0),
        next_review_at=parse_timestamp(raw.get("next_review_at")),
        last_reviewed_at=parse_timestamp(raw.get("last_reviewed_at")),
        burned_at=parse_timestamp(raw.get("burned_at")),
        item_id=str(item_id) if item_id is not None else None,
    )


def load_item_states(path: Path) -> list[ItemProgressState]:
    """
    Read item states from a YAML or JSON file.

    Raises:
        StateFileError: unreadable file, invalid YAML, or wrong document shape.
        InvalidTimestampError: a timestamp is malformed or lacks a timezone.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StateFileError(path, f"cannot read file ({e.strerror or e})") from e

    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise StateFileError(path, f"invalid YAML/JSON: {e}") from e

    if doc is None:
        return []
    if isinstance(doc, dict):
        doc = doc.get("items", [])
    if not isinstance(doc, list):
        raise StateFileError(path, "expected a list of items or an 'items' list")

    items = [_item_from_mapping(raw, i, path) for i, raw in enumerate(doc)]
    logger.debug(f"Loaded {len(items)} item state(s) from {path}")
    return items


def _jsonable(data: dict[str, Any]) -> dict[str, Any]:
    return {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in data.items()}


def item_to_dict(item: ItemProgressState) -> dict[str, Any]:
    data = _jsonable(asdict(item))
    data["stage_name"] = get_name(item.stage)
    return data


def outcome_to_dict(outcome: ReviewOutcome) -> dict[str, Any]:
    data = _jsonable(asdict(outcome))
    data["new_stage_name"] = get_name(outcome.new_stage)
    return data

