"""Configuration loading utilities for unitext."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .paths import runtime_config_dir

TRIM_CHARACTERS = " \t\n\r\0\x0B\u00a0"
ELLIPSIS = "\u2026"


class EngineConfig(BaseModel):
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds a single regex call may run before it counts as exhausted backtracking",
    )
    cache_size: int = Field(default=256, ge=0, description="Compiled pattern cache size")


class TextConfig(BaseModel):
    trim_characters: str = Field(default=TRIM_CHARACTERS)
    ellipsis: str = Field(default=ELLIPSIS)
    unicode_normalization: bool = Field(
        default=True,
        description="Apply NFD in compare() and NFC in normalize(); disabled means raw code point equality",
    )


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Logging verbosity level")

    def normalized_level(self) -> str:
        return self.level.upper()

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        if value.lower() not in {"critical", "error", "warning", "info", "debug"}:
            raise ValueError(f"Unknown logging level: {value}")
        return value


class AppConfig(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    text: TextConfig = Field(default_factory=TextConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()

_active_config: AppConfig = DEFAULT_CONFIG.model_copy(deep=True)


def config_search_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit:
        yield explicit
    yield Path.cwd() / ".unitext" / "config.yaml"
    yield runtime_config_dir() / "config.yaml"


def load_config(path: Optional[Path] = None) -> AppConfig:
    for candidate in config_search_paths(path):
        if candidate.is_file():
            with candidate.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            try:
                return AppConfig.model_validate(data)
            except ValidationError as exc:
                raise ValueError(f"Invalid configuration in {candidate}: {exc}") from exc
    return DEFAULT_CONFIG.model_copy(deep=True)


def dump_default_config(target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(DEFAULT_CONFIG.model_dump(mode="json"), handle, sort_keys=False, allow_unicode=True)


def get_config() -> AppConfig:
    return _active_config


def configure(config: AppConfig | None = None) -> AppConfig:
    """Install ``config`` (or the defaults) as the process wide settings."""
    global _active_config
    _active_config = config.model_copy(deep=True) if config is not None else DEFAULT_CONFIG.model_copy(deep=True)
    return _active_config


__all__ = [
    "TRIM_CHARACTERS",
    "ELLIPSIS",
    "EngineConfig",
    "TextConfig",
    "LoggingConfig",
    "AppConfig",
    "DEFAULT_CONFIG",
    "config_search_paths",
    "load_config",
    "dump_default_config",
    "get_config",
    "configure",
]
