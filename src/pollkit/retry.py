"""Exception classification for polling sessions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from typing_extensions import Self

from .errors import InvalidPollConfigError


class RetryMode(str, Enum):
    NEVER = "never"
    ALWAYS = "always"
    ON_KINDS = "on_kinds"


@dataclass(frozen=True)
class RetryPolicy:
    mode: RetryMode = RetryMode.NEVER
    kinds: tuple[type[Exception], ...] = ()

    @classmethod
    def never(cls) -> Self:
        return cls(RetryMode.NEVER)

    @classmethod
    def always(cls) -> Self:
        return cls(RetryMode.ALWAYS)

    @classmethod
    def on_kinds(cls, kinds: Iterable[type[Exception]]) -> Self:
        resolved = tuple(kinds)
        for kind in resolved:
            if not (isinstance(kind, type) and issubclass(kind, Exception)):
                raise InvalidPollConfigError(
                    f"Invalid retry exception kind: {kind!r}",
                    hint="retry_on_exceptions accepts Exception subclasses only.",
                )
        return cls(RetryMode.ON_KINDS, resolved)

    def should_retry(self, error: BaseException) -> bool:
        if self.mode is RetryMode.ALWAYS:
            return True
        if self.mode is RetryMode.ON_KINDS:
            return isinstance(error, self.kinds)
        return False


def resolve_retry_policy(value: object) -> RetryPolicy:
    """Turn a ``retry_on_exceptions`` option into a policy."""
    if isinstance(value, RetryPolicy):
        return value
    if value is None or value is False:
        return RetryPolicy.never()
    if value is True:
        return RetryPolicy.always()
    if isinstance(value, type):
        return RetryPolicy.on_kinds([value])
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
        return RetryPolicy.on_kinds(value)
    raise InvalidPollConfigError(
        f"Unsupported retry_on_exceptions value: {value!r}",
        hint="Use True, False or a list of exception classes.",
    )
