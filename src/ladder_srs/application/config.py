from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from ladder_srs.domain.constants import DEFAULT_DUE_QUEUE_LIMIT


class EngineConfig(BaseSettings):
    """
    Configuration for the ladder-srs tooling.
    Supports loading from:
    1. Config file (~/.config/ladder-srs/config.toml or ~/.ladder-srs.toml)
    2. Environment variables (LADDER_SRS_*)
    3. Manual overrides (CLI)

    The stage table and SM-2 constants are fixed and not configurable here.
    """

    model_config = SettingsConfigDict(
        env_prefix="LADDER_SRS_",
        extra="ignore",
    )

    # Paths
    state_file: Path | None = None

    # Due queue
    due_queue_limit: int | None = Field(default=DEFAULT_DUE_QUEUE_LIMIT, ge=0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    verbose: int = Field(default=0, ge=0)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Home may have moved since import (tests patch HOME)
        home = Path.home()
        candidates = [home / ".config/ladder-srs/config.toml", home / ".ladder-srs.toml"]

        toml_file = None
        for f in candidates:
            if f.exists():
                toml_file = f
                break

        # Earlier sources win: overrides, then env, then file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("state_file", mode="before")
    @classmethod
    def resolve_state_file(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v


def resolve_config(overrides: dict[str, Any] | None = None) -> EngineConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in EngineConfig
    2. ~/.config/ladder-srs/config.toml (if exists)
    3. Environment variables (LADDER_SRS_*)
    4. overrides (passed from Typer; None values are dropped)
    """
    clean = {k: v for k, v in (overrides or {}).items() if v is not None}
    return EngineConfig(**clean)
