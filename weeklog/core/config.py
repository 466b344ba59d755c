from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from weeklog.core.errors import ConfigError

CURRENT_CONFIG_VERSION = 1

LOG_LEVELS = ("debug", "info", "warning", "error")


class WeeklogConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    config_version: int = CURRENT_CONFIG_VERSION
    log_level: str = "info"
    dump_path: str | None = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().lower()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


class LoadedConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    config: WeeklogConfig
    existed: bool


def default_config() -> WeeklogConfig:
    return WeeklogConfig()


def load_config(*, path: Path) -> LoadedConfig:
    if not path.exists():
        return LoadedConfig(config=default_config(), existed=False)

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid config yaml at {path}: {exc}") from exc

    if raw is None:
        return LoadedConfig(config=default_config(), existed=True)
    if not isinstance(raw, dict):
        raise ConfigError("config root must be a mapping")

    try:
        parsed = WeeklogConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"invalid config schema: {exc}") from exc
    return LoadedConfig(config=parsed, existed=True)


def save_config_atomic(*, config: WeeklogConfig, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")

    payload = config.model_dump(mode="json")
    content = yaml.safe_dump(payload, sort_keys=False)

    tmp_path.write_text(content, encoding="utf-8")
    tmp_path.replace(path)
