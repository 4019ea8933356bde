"""Backoff interval variants."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from .errors import InvalidPollConfigError

EXPONENTIAL = "exponential"
DEFAULT_EXPONENTIAL_BASE = 0.5


@dataclass(frozen=True)
class FixedInterval:
    seconds: float = 1.0

    def seconds_for(self, attempt: int) -> float:
        del attempt
        return self.seconds


@dataclass(frozen=True)
class ExponentialInterval:
    """Binary exponential backoff: ``base * 2 ** (attempt - 1)``."""

    base: float = DEFAULT_EXPONENTIAL_BASE

    def seconds_for(self, attempt: int) -> float:
        return self.base * (2 ** (attempt - 1))


@dataclass(frozen=True)
class CustomInterval:
    func: Callable[[int], float]

    def seconds_for(self, attempt: int) -> float:
        return self.func(attempt)


Interval = Union[FixedInterval, ExponentialInterval, CustomInterval]


def require_seconds(value: float, *, option: str) -> float:
    seconds = float(value)
    if math.isnan(seconds) or seconds < 0:
        raise InvalidPollConfigError(
            f"Invalid {option} value: {value!r}",
            hint=f"{option} must be a non-negative number of seconds.",
        )
    return seconds


def resolve_interval(value: object) -> Interval:
    """Turn an ``every`` option into one of the interval variants."""
    if isinstance(value, (FixedInterval, ExponentialInterval, CustomInterval)):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == EXPONENTIAL:
            return ExponentialInterval()
        try:
            return FixedInterval(require_seconds(float(normalized), option="every"))
        except ValueError as exc:
            raise InvalidPollConfigError(
                f"Invalid every value: {value!r}",
                hint=f"Use a number of seconds or '{EXPONENTIAL}'.",
            ) from exc
    if isinstance(value, bool):
        raise InvalidPollConfigError(
            f"Invalid every value: {value!r}",
            hint=f"Use a number of seconds or '{EXPONENTIAL}'.",
        )
    if isinstance(value, (int, float)):
        return FixedInterval(require_seconds(value, option="every"))
    if callable(value):
        return CustomInterval(value)
    raise InvalidPollConfigError(
        f"Unsupported every value: {value!r}",
        hint=f"Use a number of seconds, a callable or '{EXPONENTIAL}'.",
    )
