"""XDG config loading for command line defaults."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from .errors import InvalidPollConfigError
from .interval import EXPONENTIAL, resolve_interval
from .logging import LOG_LEVELS, normalize_level

DEFAULT_CONFIG_PATH = Path("~/.config/pollkit/config.toml").expanduser()
LOG_LEVEL_ENV = "POLLKIT_LOG_LEVEL"
DEFAULT_EVERY = 1.0
DEFAULT_LOG_LEVEL = "WARN"


class PollDefaults(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    every: Union[float, Literal["exponential"]] = DEFAULT_EVERY
    timeout_seconds: float | None = Field(default=None, ge=0)
    max_retries: int | None = Field(default=None, ge=1)
    retry_on_errors: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator("every", mode="before")
    @classmethod
    def _validate_every(cls, value: object) -> object:
        if isinstance(value, str) and value.strip().lower() == EXPONENTIAL:
            return EXPONENTIAL
        if isinstance(value, bool):
            raise ValueError(f"Invalid every value: {value!r}")
        if isinstance(value, (int, float)) and value < 0:
            raise ValueError(f"Invalid every value: {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = normalize_level(value)
        if normalized not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}")
        return normalized


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def _sanitize(raw: dict[str, object]) -> PollDefaults:
    cfg = PollDefaults()

    every = raw.get("every")
    if every is not None:
        try:
            resolve_interval(every)
            cfg.every = every  # type: ignore[assignment]
        except (InvalidPollConfigError, ValueError):
            pass

    timeout_seconds = raw.get("timeout_seconds")
    if isinstance(timeout_seconds, (int, float)) and not isinstance(timeout_seconds, bool):
        if timeout_seconds >= 0:
            cfg.timeout_seconds = float(timeout_seconds)

    max_retries = raw.get("max_retries")
    if isinstance(max_retries, int) and not isinstance(max_retries, bool) and max_retries >= 1:
        cfg.max_retries = max_retries

    retry_on_errors = raw.get("retry_on_errors", cfg.retry_on_errors)
    if isinstance(retry_on_errors, bool):
        cfg.retry_on_errors = retry_on_errors

    log_level = raw.get("log_level", cfg.log_level)
    if isinstance(log_level, str) and normalize_level(log_level) in LOG_LEVELS:
        cfg.log_level = log_level

    env_level = os.getenv(LOG_LEVEL_ENV, "").strip()
    if env_level and normalize_level(env_level) in LOG_LEVELS:
        cfg.log_level = env_level

    return cfg


def load_config(path: str | Path | None = None) -> PollDefaults:
    resolved = get_config_path(path)
    if not resolved.exists():
        return _sanitize({})
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return _sanitize({})
    if not isinstance(raw, dict):
        return _sanitize({})
    return _sanitize(raw)
