from __future__ import annotations

import time

import pytest

from pollkit import ExponentialInterval, MaxRetriesExceededError, PollTimeoutError, poll


def test_returns_result_with_real_clock() -> None:
    calls: list[int] = []

    def operation(attempt: int) -> str:
        calls.append(attempt)
        return "desired_result"

    assert poll(operation, every=0.01, for_=0.01) == "desired_result"
    assert calls == [1]


def test_poll_stops_after_duration() -> None:
    attempts: list[int] = []

    with pytest.raises(PollTimeoutError):
        poll(attempts.append, every=0.01, for_=0.05, stop_when=lambda *_: False)

    assert 1 <= len(attempts) <= 5
    assert attempts == list(range(1, len(attempts) + 1))


def test_max_retries_with_real_clock() -> None:
    attempts: list[int] = []

    with pytest.raises(MaxRetriesExceededError):
        poll(attempts.append, every=0.01, max_retries=3, stop_when=lambda *_: False)

    assert attempts == [1, 2, 3]


def test_exponential_waits_double() -> None:
    start = time.monotonic()
    times: list[float] = []

    def operation(attempt: int) -> str | None:
        times.append(time.monotonic() - start)
        return "some_result" if attempt == 3 else None

    result = poll(
        operation,
        every=ExponentialInterval(base=0.05),
        max_retries=3,
        stop_when=lambda result, _: bool(result),
    )

    assert result == "some_result"
    assert len(times) == 3
    assert times[1] > times[0] * 2
    assert times[2] > times[1] * 2
