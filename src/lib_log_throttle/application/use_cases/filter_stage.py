"""Use case throttling a single record.

Purpose
-------
Run the per-record pipeline: extract the group key, touch the group's state,
sample its rate, evict one idle group if due, and let the bucket limiter decide
whether the record passes.

Contents
--------
* :class:`ThrottleVerdict` - outcome of evaluating one record.
* :class:`FilterStage` - orchestrator invoked by hosts for every record.

System Role
-----------
Application-layer entry point assembled by
:func:`lib_log_throttle.runtime.create_throttle_filter`. The clock is read once
per record and that instant drives every decision taken for the record.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from lib_log_throttle.application.ports import ClockPort, LoggerPort
from lib_log_throttle.domain import (
    BucketLimiter,
    EvictionPolicy,
    GroupKey,
    GroupKeyExtractor,
    GroupStore,
    RateEstimator,
)

logger = logging.getLogger(__name__)

Record = Mapping[Any, Any]


@dataclass(slots=True, frozen=True)
class ThrottleVerdict:
    """Decision taken for one record.

    Attributes
    ----------
    accepted:
        ``True`` when the group still had budget for the record.
    group_key:
        Key the record was accounted under.
    record:
        The record to forward downstream, or ``None`` when it is dropped.
    evicted:
        Key of an idle group evicted while processing, if any.
    """

    accepted: bool
    group_key: GroupKey
    record: Record | None
    evicted: GroupKey | None = None


def _to_epoch(moment: datetime) -> float:
    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        raise ValueError("timestamp must be timezone-aware")
    return moment.timestamp()


class FilterStage:
    """Decide per record whether it passes, grouping records by key.

    Parameters
    ----------
    extractor:
        Produces the group key of each record.
    store:
        Owns per-group state in access order.
    rate_estimator, eviction, limiter:
        Domain policies applied in that order after the store is touched.
    drop_records:
        When ``False`` suppressed records are still returned (observe-only).
    clock:
        Source of ``now`` when callers do not pass one.
    log:
        Sink for the lifecycle debug messages.
    """

    def __init__(
        self,
        *,
        extractor: GroupKeyExtractor,
        store: GroupStore,
        rate_estimator: RateEstimator,
        eviction: EvictionPolicy,
        limiter: BucketLimiter,
        clock: ClockPort,
        drop_records: bool = True,
        log: LoggerPort | None = None,
    ) -> None:
        self._extractor = extractor
        self._store = store
        self._rate = rate_estimator
        self._eviction = eviction
        self._limiter = limiter
        self._drop_records = drop_records
        self._clock = clock
        self._log = log

    @property
    def store(self) -> GroupStore:
        return self._store

    @property
    def tracked_groups(self) -> int:
        """Return the number of groups currently holding state."""

        return len(self._store)

    def evaluate(self, record: Record, *, now: datetime | None = None) -> ThrottleVerdict:
        """Account ``record`` against its group and return the full verdict."""

        moment = _to_epoch(now if now is not None else self._clock.now())
        key = self._extractor.extract(record)
        state = self._store.touch(key, now=moment)
        self._rate.observe(state, moment)
        evicted = self._eviction.sweep(self._store, moment)
        if evicted is not None:
            logger.debug("evicted idle group %r", evicted)
        accepted = self._limiter.allow(key, state, moment)
        forwarded = record if accepted or not self._drop_records else None
        return ThrottleVerdict(accepted=accepted, group_key=key, record=forwarded, evicted=evicted)

    def process(self, record: Record, *, now: datetime | None = None) -> Record | None:
        """Return ``record`` when it passes, ``None`` when it is dropped."""

        return self.evaluate(record, now=now).record

    def shutdown(self) -> None:
        """Log a summary of tracked groups when the host stops the filter."""

        summary = {
            "groups": len(self._store),
            "exceeded": sum(1 for _, state in self._store.items() if state.exceeded),
        }
        if self._log is not None:
            self._log.debug("counters summary", summary)
        else:
            logger.debug("counters summary: %s", summary)


__all__ = ["FilterStage", "Record", "ThrottleVerdict"]
