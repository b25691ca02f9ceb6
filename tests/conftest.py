from datetime import datetime, timezone

import pytest

from ladder_srs.domain.models import ItemProgressState
from ladder_srs.domain.ports import FixedClock


@pytest.fixture
def now():
    """A fixed, timezone-aware reference instant."""
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now):
    return FixedClock(now)


@pytest.fixture
def make_item():
    """Factory for ItemProgressState with sensible defaults."""

    def _make(stage=1, next_review_at=None, item_id=None, **kwargs):
        return ItemProgressState(
            stage=stage, next_review_at=next_review_at, item_id=item_id, **kwargs
        )

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config lookups from the real user's files and environment
    monkeypatch.setenv("HOME", str(home))
    for var in ("LADDER_SRS_STATE_FILE", "LADDER_SRS_DUE_QUEUE_LIMIT", "LADDER_SRS_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return home
