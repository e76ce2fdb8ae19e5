"""Coarse per-group records/second sampling."""

from __future__ import annotations

import math

from .group_state import GroupState


def round_half_up(value: float) -> int:
    """Round a non-negative rate to the nearest integer, halves rounding up.

    Examples
    --------
    >>> round_half_up(2.5), round_half_up(2.49)
    (3, 2)
    """

    return int(math.floor(value + 0.5))


class RateEstimator:
    """Maintain ``approx_rate`` as an instantaneous, unsmoothed sample.

    A sample is taken at most once per second per group: when at least one
    second has passed since the previous sample, the records counted since then
    are divided by the elapsed time. No decay is applied, so a group that goes
    quiet keeps its last sample until its next record arrives.
    """

    def __init__(self, *, bucket_limit: int) -> None:
        self._bucket_limit = bucket_limit

    def observe(self, state: GroupState, now: float) -> None:
        """Count one record for ``state`` and refresh the sample when due."""

        state.rate_count += 1
        elapsed = now - state.rate_last_reset
        if elapsed < 1:
            return
        state.approx_rate = round_half_up(state.rate_count / elapsed)
        state.rate_count = 0
        state.rate_count_last = self._bucket_limit
        state.rate_last_reset = now


__all__ = ["RateEstimator", "round_half_up"]
