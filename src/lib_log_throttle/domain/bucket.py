"""Period/bucket state machine deciding pass or drop per record.

Purpose
-------
Enforce ``bucket_limit`` records per group per aligned period of
``bucket_period_s`` seconds, with optional hysteresis before a group that
exceeded its budget may pass records again.

Contents
--------
* :class:`TransitionListener` - protocol notified on exceeded/recovered events.
* :class:`BucketLimiter` - the state machine.

System Role
-----------
Core policy of the throttle. Time only advances when records arrive: a period
in which a group receives nothing is skipped, and the state change it would
have caused is applied when the next record shows up.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .group_key import GroupKey
from .group_state import Exceeded, GroupState, Normal

HYSTERESIS_DISABLED = -1


@runtime_checkable
class TransitionListener(Protocol):
    """Receive the side-effect hooks of :class:`BucketLimiter`."""

    def rate_exceeded(self, now: float, key: GroupKey, state: GroupState) -> None: ...

    def rate_back_down(self, now: float, key: GroupKey, state: GroupState) -> None: ...


class BucketLimiter:
    """Decide whether a record of a group may pass.

    Parameters
    ----------
    bucket_period_s:
        Period length in whole seconds; periods are aligned on the epoch.
    bucket_limit:
        Records accepted per group per period.
    reset_rate_s:
        Records/second an exceeded group must drop below before it recovers at
        a period boundary; ``-1`` recovers unconditionally.
    listener:
        Receives ``rate_exceeded`` / ``rate_back_down`` at the transitions.
    """

    def __init__(
        self,
        *,
        bucket_period_s: int,
        bucket_limit: int,
        reset_rate_s: int,
        listener: TransitionListener,
    ) -> None:
        self._period = bucket_period_s
        self._limit = bucket_limit
        self._reset_rate = reset_rate_s
        self._listener = listener

    def period_index(self, timestamp: float) -> int:
        """Return the index of the period containing ``timestamp``."""

        return int(timestamp) // self._period

    def allow(self, key: GroupKey, state: GroupState, now: float) -> bool:
        """Return ``True`` when the record may pass; mutate ``state`` accordingly."""

        if self.period_index(now) > self.period_index(state.bucket_last_reset):
            if state.exceeded and self._reset_rate != HYSTERESIS_DISABLED:
                if state.approx_rate < self._reset_rate:
                    self._listener.rate_back_down(now, key, state)
                else:
                    self._listener.rate_exceeded(now, key, state)
                    return False
            state.bucket = Normal(0)
            state.bucket_last_reset = now
        elif state.exceeded:
            self._listener.rate_exceeded(now, key, state)
            return False

        state.bucket = Normal(state.bucket.count + 1)
        # count may sit at limit + 1 while the listener reports the overflow
        if state.bucket.count > self._limit:
            self._listener.rate_exceeded(now, key, state)
            state.bucket = Exceeded()
            return False
        return True


__all__ = ["BucketLimiter", "HYSTERESIS_DISABLED", "TransitionListener"]
