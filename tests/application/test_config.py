from pathlib import Path

import pytest
from pydantic import ValidationError

from ladder_srs.application.config import EngineConfig, resolve_config


def test_defaults(mock_home):
    config = resolve_config()
    assert config.due_queue_limit == 100
    assert config.log_level == "INFO"
    assert config.state_file is None
    assert config.verbose == 0


def test_env_overrides_defaults(mock_home, monkeypatch):
    monkeypatch.setenv("LADDER_SRS_DUE_QUEUE_LIMIT", "25")
    monkeypatch.setenv("LADDER_SRS_LOG_LEVEL", "debug")
    config = resolve_config()
    assert config.due_queue_limit == 25
    assert config.log_level == "DEBUG"


def test_toml_file_is_read(mock_home):
    cfg_dir = mock_home / ".config" / "ladder-srs"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / "config.toml").write_text('due_queue_limit = 7\nstate_file = "items.yaml"\n')

    config = resolve_config()
    assert config.due_queue_limit == 7
    assert config.state_file == Path("items.yaml").resolve()


def test_env_beats_toml_and_overrides_beat_env(mock_home, monkeypatch):
    (mock_home / ".ladder-srs.toml").write_text("due_queue_limit = 7\n")
    monkeypatch.setenv("LADDER_SRS_DUE_QUEUE_LIMIT", "9")
    assert resolve_config().due_queue_limit == 9
    assert resolve_config({"due_queue_limit": 3}).due_queue_limit == 3


def test_none_overrides_are_ignored(mock_home):
    assert resolve_config({"due_queue_limit": None}).due_queue_limit == 100


def test_negative_limit_rejected(mock_home):
    with pytest.raises(ValidationError):
        EngineConfig(due_queue_limit=-5)
