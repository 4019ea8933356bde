"""Attempt loop that repeats an operation until a stop condition holds."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from .clock import DEFAULT_CLOCK, Clock
from .errors import (
    InvalidInvocationError,
    InvalidPollConfigError,
    MaxRetriesExceededError,
    PollTimeoutError,
)
from .interval import FixedInterval, Interval, require_seconds, resolve_interval
from .retry import RetryPolicy, resolve_retry_policy

T = TypeVar("T")

logger = py_logging.getLogger(__name__)

DEFAULT_EVERY = 1.0
INFINITE_POLLING_WARNING = (
    "[pollkit] Warning: Polling with no time limit and no stop condition will lead to infinite loops."
)


def accept_first(result: object, attempt: int) -> bool:
    del result, attempt
    return True


@dataclass(frozen=True)
class PollConfig:
    interval: Interval = field(default_factory=lambda: FixedInterval(DEFAULT_EVERY))
    deadline: float | None = None
    max_attempts: int | None = None
    stop_when: Callable[[Any, int], bool] = accept_first
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy.never)


def _resolve_max_attempts(value: object) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidPollConfigError(
            f"Invalid max_retries value: {value!r}",
            hint="max_retries must be a positive integer.",
        )
    return value


class PollLoop:
    """One polling session.

    Options are resolved once, at construction. The deadline is fixed at
    ``clock.now() + for_`` and is checked before every attempt, including the
    first one, so an attempt already in flight always completes.
    """

    def __init__(
        self,
        *,
        every: object = DEFAULT_EVERY,
        for_: float | None = None,
        max_retries: int | None = None,
        stop_when: Callable[[Any, int], bool] | None = None,
        retry_on_exceptions: object = False,
        clock: Clock | None = None,
        diagnostics: py_logging.Logger | None = None,
    ) -> None:
        self.clock = clock or DEFAULT_CLOCK
        if stop_when is not None and not callable(stop_when):
            raise InvalidPollConfigError(
                f"Invalid stop_when value: {stop_when!r}",
                hint="stop_when must be a callable taking (result, attempt).",
            )

        deadline = None
        if for_ is not None:
            if isinstance(for_, bool) or not isinstance(for_, (int, float)):
                raise InvalidPollConfigError(
                    f"Invalid for value: {for_!r}",
                    hint="for must be a number of seconds.",
                )
            deadline = self.clock.now() + require_seconds(for_, option="for")

        self.config = PollConfig(
            interval=resolve_interval(every),
            deadline=deadline,
            max_attempts=_resolve_max_attempts(max_retries),
            stop_when=stop_when or accept_first,
            retry_policy=resolve_retry_policy(retry_on_exceptions),
        )

        if deadline is None and stop_when is None:
            (diagnostics or logger).warning(INFINITE_POLLING_WARNING)

    def backoff_seconds(self, attempt: int) -> float:
        return self.config.interval.seconds_for(attempt)

    def _wait(self, attempt: int) -> None:
        seconds = self.backoff_seconds(attempt)
        logger.debug("Waiting %ss before attempt %s", seconds, attempt + 1)
        self.clock.sleep(seconds)

    def _expired(self) -> bool:
        deadline = self.config.deadline
        return deadline is not None and self.clock.now() >= deadline

    def run(self, operation: Callable[[int], T] | None = None) -> T:
        if operation is None or not callable(operation):
            raise InvalidInvocationError(
                "An operation must be provided to poll",
                hint="Pass a callable that accepts the attempt number.",
            )

        config = self.config
        last_error: Exception | None = None
        attempt = 0

        while config.max_attempts is None or attempt < config.max_attempts:
            attempt += 1
            if self._expired():
                logger.debug("Deadline reached before attempt %s", attempt)
                raise PollTimeoutError(
                    "Polling timed out", cause=last_error, attempts=attempt - 1
                ) from last_error

            try:
                result = operation(attempt)
                done = config.stop_when(result, attempt)
            except Exception as exc:
                if not config.retry_policy.should_retry(exc):
                    raise
                logger.debug("Attempt %s raised retryable %s: %s", attempt, type(exc).__name__, exc)
                last_error = exc
                self._wait(attempt)
                continue

            if done:
                logger.debug("Stop condition met on attempt %s", attempt)
                return result
            self._wait(attempt)

        raise MaxRetriesExceededError(
            "Polled maximum number of retries", cause=last_error, attempts=attempt
        ) from last_error
