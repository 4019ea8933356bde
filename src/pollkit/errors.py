"""Deterministic error model and exit code contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    RUNTIME_ERROR = 1
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    TIMEOUT = 4
    RETRIES_EXHAUSTED = 5
    COMMAND_ERROR = 6


@dataclass
class PollKitError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


@dataclass
class InvalidInvocationError(PollKitError):
    """Raised when a poll is started without an operation to run."""

    code: ExitCode = ExitCode.INVALID_ARGS


@dataclass
class InvalidPollConfigError(PollKitError):
    """Raised when poll options cannot be resolved into a configuration."""

    code: ExitCode = ExitCode.CONFIG_ERROR


@dataclass
class PollError(PollKitError):
    """Terminal polling failure.

    ``cause`` holds the last retryable error seen by the loop, or ``None``
    when every attempt returned a result the stop predicate rejected.
    """

    cause: BaseException | None = None
    attempts: int = 0


@dataclass
class PollTimeoutError(PollError):
    code: ExitCode = ExitCode.TIMEOUT


@dataclass
class MaxRetriesExceededError(PollError):
    code: ExitCode = ExitCode.RETRIES_EXHAUSTED


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
