"""Polling and retry loops with deadlines, attempt caps and backoff."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from .clock import Clock, ManualClock, SystemClock
from .errors import (
    ExitCode,
    InvalidInvocationError,
    InvalidPollConfigError,
    MaxRetriesExceededError,
    PollError,
    PollKitError,
    PollTimeoutError,
)
from .interval import EXPONENTIAL, CustomInterval, ExponentialInterval, FixedInterval
from .poller import PollConfig, PollLoop
from .retry import RetryMode, RetryPolicy

__version__ = "0.3.0"

T = TypeVar("T")


def _loop_options(options: dict[str, Any]) -> dict[str, Any]:
    if "for" in options:
        options["for_"] = options.pop("for")
    return options


def poll(operation: Callable[[int], T] | None = None, **options: Any) -> T:
    """Build a :class:`PollLoop` from ``options`` and run ``operation`` through it."""
    return PollLoop(**_loop_options(dict(options))).run(operation)


def polling(**options: Any) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorate a function so each call is polled with ``options``.

    The wrapped function receives the attempt number as its first argument,
    followed by whatever the caller passed.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            return poll(lambda attempt: func(attempt, *args, **kwargs), **options)

        return wrapper

    return decorator


__all__ = [
    "EXPONENTIAL",
    "Clock",
    "CustomInterval",
    "ExitCode",
    "ExponentialInterval",
    "FixedInterval",
    "InvalidInvocationError",
    "InvalidPollConfigError",
    "ManualClock",
    "MaxRetriesExceededError",
    "PollConfig",
    "PollError",
    "PollKitError",
    "PollLoop",
    "PollTimeoutError",
    "RetryMode",
    "RetryPolicy",
    "SystemClock",
    "__version__",
    "poll",
    "polling",
]
