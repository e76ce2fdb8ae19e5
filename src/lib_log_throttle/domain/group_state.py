"""Per-group counters and bucket states.

Purpose
-------
Hold the mutable accounting kept for every observed group key. The values are
plain data; behaviour lives in the rate estimator, the bucket limiter and the
notifier.

Contents
--------
* :class:`Normal` / :class:`Exceeded` - the two bucket states.
* :class:`GroupState` - counters and timestamps for one group.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

EXCEEDED_COUNT = -1


@dataclass(slots=True, frozen=True)
class Normal:
    """Bucket accepting records; ``count`` records were accepted this period."""

    count: int = 0

    @property
    def exceeded(self) -> bool:
        return False


@dataclass(slots=True, frozen=True)
class Exceeded:
    """Bucket exhausted; records are suppressed until recovery."""

    @property
    def count(self) -> int:
        """Return ``-1``, the numeric encoding used in diagnostics."""

        return EXCEEDED_COUNT

    @property
    def exceeded(self) -> bool:
        return True


BucketState = Union[Normal, Exceeded]


@dataclass(slots=True)
class GroupState:
    """Counters and timestamps tracked for a single group.

    Attributes
    ----------
    rate_count:
        Records observed since the last rate sample.
    rate_last_reset:
        Epoch seconds of the last rate sample.
    approx_rate:
        Last computed records/second sample.
    bucket:
        :class:`Normal` or :class:`Exceeded`.
    bucket_last_reset:
        Epoch seconds marking the start of the current accounting period.
    last_warning:
        Epoch seconds of the last warning, ``None`` when never warned.
    rate_count_last:
        Baseline used to compute metric increments.
    """

    rate_count: int
    rate_last_reset: float
    approx_rate: int
    bucket: BucketState
    bucket_last_reset: float
    last_warning: float | None
    rate_count_last: int

    @classmethod
    def fresh(cls, now: float, *, bucket_limit: int) -> "GroupState":
        """Return the state assigned to a group on its first record."""

        return cls(
            rate_count=0,
            rate_last_reset=now,
            approx_rate=0,
            bucket=Normal(0),
            bucket_last_reset=now,
            last_warning=None,
            rate_count_last=bucket_limit,
        )

    @property
    def bucket_count(self) -> int:
        """Return the bucket count with ``-1`` standing for :class:`Exceeded`."""

        return self.bucket.count

    @property
    def exceeded(self) -> bool:
        return self.bucket.exceeded


__all__ = ["BucketState", "EXCEEDED_COUNT", "Exceeded", "GroupState", "Normal"]
