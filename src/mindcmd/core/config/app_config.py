from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator, model_validator

from mindcmd.constants import (
    DEFAULT_KEY_COMMANDS,
    DEFAULT_KEY_PATTERNS,
    DEFAULT_MAX_EDIT_DISTANCE,
    DEFAULT_REPORTED_SUGGESTIONS,
    DEFAULT_SUGGESTION_LIMIT,
    NUMBERED_LIST_ARGUMENT,
    NUMBERED_LIST_COMMAND,
    NUMBERED_LIST_KEY,
)
from mindcmd.core.common.exceptions import ConfigurationError
from mindcmd.core.domain.model_bases import DomainModel

logger = logging.getLogger(__name__)

ENV_LOG_LEVEL = "MINDCMD_LOG_LEVEL"
ENV_LOG_FILE = "MINDCMD_LOG_FILE"
ENV_SUGGESTION_LIMIT = "MINDCMD_SUGGESTION_LIMIT"


def _env_to_int(name: str, default: int, env: Mapping[str, str]) -> int:
    """Return an environment variable parsed as an integer."""
    value = env.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-integer value for %s: %r", name, value)
        return default


def _merge_dicts(base: dict[str, Any], override: Mapping[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _merge_dicts(base[key], value)
        else:
            base[key] = value


class LogLevel(str, Enum):
    """Log levels for configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(DomainModel):
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    log_file: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class KeymapConfig(DomainModel):
    """Key-sequence pattern table and its mapping to textual commands."""

    patterns: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_KEY_PATTERNS))
    commands: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_KEY_COMMANDS))
    numbered_key: str = NUMBERED_LIST_KEY
    numbered_command: str = NUMBERED_LIST_COMMAND
    numbered_argument: str = NUMBERED_LIST_ARGUMENT

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v: dict[str, str]) -> dict[str, str]:
        for sequence, identifier in v.items():
            if not sequence:
                raise ValueError("Key sequence must not be empty")
            if sequence[0] in "123456789":
                raise ValueError(
                    f"Key sequence '{sequence}' must not start with a count digit"
                )
            if not identifier:
                raise ValueError(f"Key sequence '{sequence}' maps to an empty command")
        return v

    @field_validator("numbered_key")
    @classmethod
    def validate_numbered_key(cls, v: str) -> str:
        if not v or v[0].isdigit():
            raise ValueError("numbered_key must be a non-digit key")
        return v


class SuggestionConfig(DomainModel):
    """Suggestion ranking limits."""

    limit: int = Field(default=DEFAULT_SUGGESTION_LIMIT, ge=1)
    max_distance: int = Field(default=DEFAULT_MAX_EDIT_DISTANCE, ge=0)
    reported: int = Field(default=DEFAULT_REPORTED_SUGGESTIONS, ge=0)

    @model_validator(mode="after")
    def validate_reported(self) -> SuggestionConfig:
        if self.reported > self.limit:
            raise ValueError("reported suggestions cannot exceed the suggestion limit")
        return self


class EngineConfig(DomainModel):
    """Top-level configuration for the command engine."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    keymap: KeymapConfig = Field(default_factory=KeymapConfig)
    suggestions: SuggestionConfig = Field(default_factory=SuggestionConfig)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """Build a configuration from defaults plus environment overrides."""
        data = cls().model_dump()
        _apply_env_overrides(data, environ if environ is not None else os.environ)
        return cls.model_validate(data)

    def save(self, path: str | Path) -> None:
        """Write the configuration as YAML."""
        p = Path(path)
        with p.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, sort_keys=False)


def _apply_env_overrides(data: dict[str, Any], env: Mapping[str, str]) -> None:
    level = env.get(ENV_LOG_LEVEL)
    if level:
        data["logging"]["level"] = level
    log_file = env.get(ENV_LOG_FILE)
    if log_file:
        data["logging"]["log_file"] = log_file
    data["suggestions"]["limit"] = _env_to_int(
        ENV_SUGGESTION_LIMIT, data["suggestions"]["limit"], env
    )


def load_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> EngineConfig:
    """
    Load configuration from an optional YAML file and the environment.

    Environment variables win over file values, which win over defaults.
    Mapping sections from the file are merged key by key into the defaults,
    so a file that lists a few ``keymap.commands`` entries extends the
    default table rather than replacing it.

    Raises:
        ConfigurationError: If the file has an unsupported suffix, cannot be
            parsed, or produces an invalid configuration.
    """
    env = environ if environ is not None else os.environ
    config_data: dict[str, Any] = EngineConfig().model_dump()

    if config_path:
        path = Path(config_path)
        if not path.exists():
            logger.warning("Configuration file not found: %s", config_path)
        else:
            if path.suffix.lower() not in (".yaml", ".yml"):
                raise ConfigurationError(
                    f"Unsupported configuration file format: {path.suffix}. Use YAML (.yaml/.yml).",
                    details={"path": str(path)},
                )
            try:
                with path.open(encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                logger.critical("Error loading configuration file: %s", exc)
                raise ConfigurationError(
                    f"Invalid YAML in {path}: {exc}", details={"path": str(path)}
                ) from exc

            if not isinstance(file_config, Mapping):
                raise ConfigurationError(
                    f"Configuration file {path} must contain a mapping",
                    details={"path": str(path)},
                )
            _merge_dicts(config_data, file_config)

    _apply_env_overrides(config_data, env)

    try:
        return EngineConfig.model_validate(config_data)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid configuration: {exc}", details={"errors": exc.errors()}
        ) from exc
