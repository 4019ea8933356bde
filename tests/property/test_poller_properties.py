from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from pollkit.clock import ManualClock
from pollkit.errors import MaxRetriesExceededError, PollTimeoutError
from pollkit.interval import ExponentialInterval
from pollkit.poller import PollLoop


def never(result: object, attempt: int) -> bool:
    return False


@given(st.integers(min_value=1, max_value=30), st.integers(min_value=0, max_value=5))
def test_returns_first_accepted_result(accept_at: int, every: int) -> None:
    clock = ManualClock()
    calls: list[int] = []

    def operation(attempt: int) -> int:
        calls.append(attempt)
        return attempt * 10

    loop = PollLoop(every=every, stop_when=lambda result, _: result >= accept_at * 10, clock=clock)

    assert loop.run(operation) == accept_at * 10
    assert calls == list(range(1, accept_at + 1))
    assert clock.sleeps == [every] * (accept_at - 1)


@given(st.integers(min_value=1, max_value=30))
def test_attempt_cap_invokes_exactly_cap_times(cap: int) -> None:
    calls: list[int] = []
    loop = PollLoop(every=0, max_retries=cap, stop_when=never, clock=ManualClock())

    with pytest.raises(MaxRetriesExceededError):
        loop.run(calls.append)

    assert calls == list(range(1, cap + 1))


@given(st.integers(min_value=1, max_value=30), st.integers(min_value=1, max_value=4))
def test_deadline_yields_contiguous_attempts(duration: int, every: int) -> None:
    calls: list[int] = []
    loop = PollLoop(every=every, for_=duration, stop_when=never, clock=ManualClock())

    with pytest.raises(PollTimeoutError):
        loop.run(calls.append)

    expected = -(-duration // every)
    assert calls == list(range(1, expected + 1))


@given(st.lists(st.booleans(), min_size=1, max_size=20))
def test_listed_errors_are_absorbed_until_success(failures: list[bool]) -> None:
    pattern = [*failures, False]
    calls: list[int] = []

    def operation(attempt: int) -> str:
        calls.append(attempt)
        if pattern[attempt - 1]:
            raise TimeoutError(f"attempt {attempt}")
        return "ok"

    success_at = pattern.index(False) + 1
    loop = PollLoop(every=0, stop_when=lambda *_: True, retry_on_exceptions=[TimeoutError], clock=ManualClock())

    assert loop.run(operation) == "ok"
    assert len(calls) == success_at


@given(st.integers(min_value=1, max_value=20), st.integers(min_value=1, max_value=20))
def test_unlisted_error_freezes_attempt_count(fail_at: int, cap: int) -> None:
    calls: list[int] = []

    def operation(attempt: int) -> None:
        calls.append(attempt)
        if attempt == fail_at:
            raise ValueError("fatal")
        raise TimeoutError("retry")

    loop = PollLoop(every=0, max_retries=cap, stop_when=never, retry_on_exceptions=[TimeoutError], clock=ManualClock())

    if fail_at <= cap:
        with pytest.raises(ValueError):
            loop.run(operation)
        assert calls == list(range(1, fail_at + 1))
    else:
        with pytest.raises(MaxRetriesExceededError) as excinfo:
            loop.run(operation)
        assert isinstance(excinfo.value.cause, TimeoutError)
        assert len(calls) == cap


@given(st.integers(min_value=1, max_value=40))
def test_exponential_interval_doubles(attempt: int) -> None:
    interval = ExponentialInterval()

    assert interval.seconds_for(attempt + 1) == 2 * interval.seconds_for(attempt)
    assert interval.seconds_for(attempt) == 0.5 * 2 ** (attempt - 1)
