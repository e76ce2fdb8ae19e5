"""Per-group rate limiting for structured log records.

Records are grouped by the values of configured dotted field paths; each group
gets a budget of ``group_bucket_limit`` records per ``group_bucket_period_s``
seconds. Once exhausted, the group's records are suppressed until a later
period in which its observed rate has fallen below ``group_reset_rate_s``.

>>> from datetime import datetime, timezone
>>> from lib_log_throttle import ThrottleConfig, create_throttle_filter
>>> stage = create_throttle_filter(ThrottleConfig(group_key=["app"], group_bucket_limit=2), environ={})
>>> now = datetime(2025, 1, 1, tzinfo=timezone.utc)
>>> [stage.process({"app": "api"}, now=now) is not None for _ in range(3)]
[True, True, False]
"""

from __future__ import annotations

from .__init__conf__ import summary_info
from .adapters import InMemoryCounterRegistry, RichConsoleLogger, StdlibLoggerAdapter, default_registry
from .application.use_cases import FilterStage, Notifier, ThrottleVerdict
from .domain import GroupKeyExtractor, GroupState, GroupStore
from .runtime import ThrottleConfig, ThrottleSettings, build_throttle_settings, create_throttle_filter

__all__ = [
    "FilterStage",
    "GroupKeyExtractor",
    "GroupState",
    "GroupStore",
    "InMemoryCounterRegistry",
    "Notifier",
    "RichConsoleLogger",
    "StdlibLoggerAdapter",
    "ThrottleConfig",
    "ThrottleSettings",
    "ThrottleVerdict",
    "build_throttle_settings",
    "create_throttle_filter",
    "default_registry",
    "summary_info",
]
