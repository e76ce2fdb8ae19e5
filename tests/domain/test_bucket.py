from __future__ import annotations

from lib_log_throttle.domain.bucket import BucketLimiter
from lib_log_throttle.domain.group_key import GroupKey
from lib_log_throttle.domain.group_state import Exceeded, GroupState, Normal

PERIOD_START = 1_735_689_600.0  # 2025-01-01T00:00:00Z, aligned on 60s periods
KEY: GroupKey = ("api",)


class _Listener:
    def __init__(self) -> None:
        self.calls: list[tuple[str, float, int]] = []

    def rate_exceeded(self, now: float, key: GroupKey, state: GroupState) -> None:
        self.calls.append(("exceeded", now, state.bucket_count))

    def rate_back_down(self, now: float, key: GroupKey, state: GroupState) -> None:
        self.calls.append(("back_down", now, state.bucket_count))


def _limiter(*, limit: int = 3, period: int = 60, reset_rate: int = -1) -> tuple[BucketLimiter, _Listener]:
    listener = _Listener()
    limiter = BucketLimiter(bucket_period_s=period, bucket_limit=limit, reset_rate_s=reset_rate, listener=listener)
    return limiter, listener


def _state(now: float = PERIOD_START) -> GroupState:
    return GroupState.fresh(now, bucket_limit=3)


def test_accepts_up_to_limit_and_counts() -> None:
    limiter, listener = _limiter(limit=3)
    state = _state()

    results = [limiter.allow(KEY, state, PERIOD_START + offset) for offset in (0, 1, 2)]

    assert results == [True, True, True]
    assert state.bucket == Normal(3)
    assert listener.calls == []


def test_overflow_record_is_dropped_and_state_becomes_exceeded() -> None:
    limiter, listener = _limiter(limit=3)
    state = _state()
    for _ in range(3):
        limiter.allow(KEY, state, PERIOD_START)

    assert limiter.allow(KEY, state, PERIOD_START + 5) is False
    assert state.bucket == Exceeded()
    assert listener.calls == [("exceeded", PERIOD_START + 5, 4)]


def test_exceeded_group_drops_until_period_boundary() -> None:
    limiter, listener = _limiter(limit=1)
    state = _state()
    limiter.allow(KEY, state, PERIOD_START)
    limiter.allow(KEY, state, PERIOD_START)

    assert limiter.allow(KEY, state, PERIOD_START + 59.9) is False
    assert [call[0] for call in listener.calls] == ["exceeded", "exceeded"]
    assert state.bucket_count == -1


def test_without_hysteresis_boundary_always_resets() -> None:
    limiter, listener = _limiter(limit=1, reset_rate=-1)
    state = _state()
    limiter.allow(KEY, state, PERIOD_START)
    limiter.allow(KEY, state, PERIOD_START)
    state.approx_rate = 1000

    assert limiter.allow(KEY, state, PERIOD_START + 60) is True
    assert state.bucket == Normal(1)
    assert state.bucket_last_reset == PERIOD_START + 60
    assert [call[0] for call in listener.calls] == ["exceeded"]


def test_hysteresis_keeps_group_exceeded_while_rate_is_high() -> None:
    limiter, listener = _limiter(limit=1, reset_rate=1)
    state = _state()
    limiter.allow(KEY, state, PERIOD_START)
    limiter.allow(KEY, state, PERIOD_START)
    state.approx_rate = 1

    assert limiter.allow(KEY, state, PERIOD_START + 61) is False
    assert state.exceeded
    assert state.bucket_last_reset == PERIOD_START
    assert listener.calls[-1][0] == "exceeded"


def test_hysteresis_recovers_once_rate_drops_below_threshold() -> None:
    limiter, listener = _limiter(limit=1, reset_rate=1)
    state = _state()
    limiter.allow(KEY, state, PERIOD_START)
    limiter.allow(KEY, state, PERIOD_START)
    state.approx_rate = 0

    assert limiter.allow(KEY, state, PERIOD_START + 125) is True
    assert state.bucket == Normal(1)
    assert state.bucket_last_reset == PERIOD_START + 125
    assert listener.calls[-1] == ("back_down", PERIOD_START + 125, -1)


def test_period_boundaries_are_aligned_to_the_epoch() -> None:
    limiter, _ = _limiter(limit=1, period=60)
    state = _state(now=PERIOD_START + 59)
    limiter.allow(KEY, state, PERIOD_START + 59)

    # one second later is a new period even though less than 60s elapsed
    assert limiter.allow(KEY, state, PERIOD_START + 60) is True
    assert state.bucket == Normal(1)


def test_skipped_periods_are_applied_on_next_record() -> None:
    limiter, _ = _limiter(limit=2)
    state = _state()
    limiter.allow(KEY, state, PERIOD_START)
    limiter.allow(KEY, state, PERIOD_START)

    assert limiter.allow(KEY, state, PERIOD_START + 600) is True
    assert state.bucket == Normal(1)
    assert limiter.period_index(state.bucket_last_reset) == limiter.period_index(PERIOD_START) + 10
