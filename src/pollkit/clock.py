"""Time sources used for deadlines and backoff waits."""

from __future__ import annotations

import math
import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    def now(self) -> float:
        """Return a monotonic reading in seconds."""
        ...

    def sleep(self, seconds: float) -> None:
        """Block for ``seconds``."""
        ...


class SystemClock:
    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class ManualClock:
    """Deterministic clock that only moves when told to.

    ``sleep`` advances the reading instantly and records the requested
    duration, so polling sessions can be replayed without real waiting.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._steps: list[float] = [float(start)]
        self.sleeps: list[float] = []

    def now(self) -> float:
        # Summed exactly so ten 0.1s sleeps read as 1.0, not 0.9999999999999999.
        return math.fsum(self._steps)

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self._steps.append(seconds)

    def advance(self, seconds: float) -> None:
        self._steps.append(seconds)


DEFAULT_CLOCK = SystemClock()
