"""Use cases composing the throttle domain into a record filter."""

from __future__ import annotations

from .filter_stage import FilterStage, Record, ThrottleVerdict
from .notifier import EXCEEDED_METRIC_NAME, Notifier

__all__ = ["EXCEEDED_METRIC_NAME", "FilterStage", "Notifier", "Record", "ThrottleVerdict"]
