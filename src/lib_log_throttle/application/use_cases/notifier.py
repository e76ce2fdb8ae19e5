"""Side effects fired when a group exceeds or recovers its budget.

Purpose
-------
Translate bucket transitions into operator-visible signals: throttled warning
logs, immediate recovery notices, and an optional counter increment.

Contents
--------
* :data:`EXCEEDED_METRIC_NAME` - name of the counter fed on exceeded events.
* :class:`Notifier` - implements :class:`~lib_log_throttle.domain.TransitionListener`.

System Role
-----------
Called by :class:`~lib_log_throttle.domain.BucketLimiter` at the exact points
where transitions happen, so reported figures reflect the state before it is
reset.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from lib_log_throttle.application.ports import CounterPort, CounterRegistryPort, LoggerPort
from lib_log_throttle.domain import GroupKey, GroupState, round_half_up

EXCEEDED_METRIC_NAME = "log_throttle_rate_limit_exceeded"
EXCEEDED_METRIC_DOC = "The exceeded rate of records in the group"


class Notifier:
    """Emit logs and metrics for bucket transitions.

    Parameters
    ----------
    logger:
        Sink receiving ``warning``/``info``/``debug`` messages.
    bucket_period_s, bucket_limit, rate_limit_s, reset_rate_s:
        Configuration echoed in every log payload.
    warning_delay_s:
        Minimum seconds between two warnings for the same group.
    registry:
        Counter registry; ``None`` disables metric emission.
    base_labels:
        Static labels resolved at startup, merged into every metric sample.
    group_label_names:
        Sanitised label names paired positionally with the group key values.
    """

    def __init__(
        self,
        *,
        logger: LoggerPort,
        bucket_period_s: int,
        bucket_limit: int,
        rate_limit_s: int,
        reset_rate_s: int,
        warning_delay_s: int,
        registry: CounterRegistryPort | None = None,
        base_labels: Mapping[str, str] | None = None,
        group_label_names: Sequence[str] = (),
    ) -> None:
        self._logger = logger
        self._period = bucket_period_s
        self._limit = bucket_limit
        self._rate_limit = rate_limit_s
        self._reset_rate = reset_rate_s
        self._warning_delay = warning_delay_s
        self._registry = registry
        self._base_labels = dict(base_labels or {})
        self._group_label_names = tuple(group_label_names)
        self._counter: CounterPort | None = None

    @property
    def metrics_enabled(self) -> bool:
        return self._registry is not None

    def rate_exceeded(self, now: float, key: GroupKey, state: GroupState) -> None:
        """Record an exceeded event and warn unless a warning went out recently."""

        if self._registry is not None:
            self._record_metric(self._registry, key, state)

        if state.last_warning is None or now - state.last_warning >= self._warning_delay:
            self._logger.warning("rate exceeded", self.describe(now, key, state))
            state.last_warning = now

    def rate_back_down(self, now: float, key: GroupKey, state: GroupState) -> None:
        """Announce that an exceeded group recovered."""

        self._logger.info("rate back down", self.describe(now, key, state))

    def describe(self, now: float, key: GroupKey, state: GroupState) -> dict[str, Any]:
        """Return the structured payload attached to transition logs."""

        return {
            "group_key": key,
            "rate_s": self._observed_rate(now, state),
            "period_s": self._period,
            "limit": self._limit,
            "rate_limit_s": self._rate_limit,
            "reset_rate_s": self._reset_rate,
        }

    def labels_for(self, key: GroupKey) -> dict[str, str]:
        """Return base labels merged with the group's key values."""

        labels = dict(self._base_labels)
        for name, value in zip(self._group_label_names, key):
            labels[name] = "" if value is None else str(value)
        return labels

    def _observed_rate(self, now: float, state: GroupState) -> float:
        since_last_reset = now - state.bucket_last_reset
        count = 0 if state.exceeded else state.bucket.count
        rate: float = round_half_up(count / since_last_reset) if since_last_reset > 0 else math.inf
        return max(rate, state.approx_rate)

    def _record_metric(self, registry: CounterRegistryPort, key: GroupKey, state: GroupState) -> None:
        counter = self._exceeded_counter(registry)
        labels = self.labels_for(key)
        self._logger.debug(
            "current rate",
            {"rate_count": state.rate_count, "metric": counter.get(labels)},
        )
        # a rate sample rebases rate_count_last to the bucket limit, so the delta
        # only approximates the suppressed volume and can be negative
        delta = state.rate_count - state.rate_count_last
        if delta > 0:
            counter.increment(delta, labels)
        state.rate_count_last = state.rate_count

    def _exceeded_counter(self, registry: CounterRegistryPort) -> CounterPort:
        if self._counter is None:
            label_names = list(self._base_labels) + list(self._group_label_names)
            self._counter = registry.get_or_create(EXCEEDED_METRIC_NAME, EXCEEDED_METRIC_DOC, label_names)
        return self._counter


__all__ = ["EXCEEDED_METRIC_DOC", "EXCEEDED_METRIC_NAME", "Notifier"]
