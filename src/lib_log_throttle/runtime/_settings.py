"""Configuration model and validation for the throttle runtime.

Purpose
-------
Turn caller-supplied :class:`ThrottleConfig` values plus ``LOG_THROTTLE_*``
environment overrides into validated :class:`ThrottleSettings`.

Contents
--------
* :class:`ThrottleConfig` - options recognised by the filter, with defaults.
* :class:`ThrottleSettings` - resolved, validated values.
* :func:`build_throttle_settings` - resolution entry point.

System Role
-----------
Every configuration error surfaces here as :class:`ValueError`, before any
record is processed.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from lib_log_throttle.adapters.labels import resolve_labels
from lib_log_throttle.domain import HYSTERESIS_DISABLED

DEFAULT_GROUP_KEY: tuple[str, ...] = ("kubernetes.container_name",)

ENV_GROUP_KEY = "LOG_THROTTLE_GROUP_KEY"
ENV_BUCKET_PERIOD = "LOG_THROTTLE_BUCKET_PERIOD_S"
ENV_BUCKET_LIMIT = "LOG_THROTTLE_BUCKET_LIMIT"
ENV_DROP_LOGS = "LOG_THROTTLE_DROP_LOGS"
ENV_RESET_RATE = "LOG_THROTTLE_RESET_RATE_S"
ENV_WARNING_DELAY = "LOG_THROTTLE_WARNING_DELAY_S"
ENV_EMIT_METRICS = "LOG_THROTTLE_EMIT_METRICS"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ThrottleConfig:
    """Options accepted by :func:`lib_log_throttle.create_throttle_filter`.

    Attributes
    ----------
    group_key:
        Dotted field paths whose values form the group key.
    group_bucket_period_s:
        Length of an accounting period in seconds.
    group_bucket_limit:
        Records allowed per group per period.
    group_drop_logs:
        Drop suppressed records (``True``) or only report them (``False``).
    group_reset_rate_s:
        Records/second an exceeded group must fall below to recover;
        ``None`` means ``group_bucket_limit // group_bucket_period_s`` and
        ``-1`` recovers at the next period regardless of rate.
    group_warning_delay_s:
        Minimum seconds between repeated warnings for a group.
    group_emit_metrics:
        Increment the exceeded counter on every exceeded event.
    labels:
        Static metric labels; values may use ``${hostname}``/``${worker_id}``.
    """

    group_key: Sequence[str] = DEFAULT_GROUP_KEY
    group_bucket_period_s: int = 60
    group_bucket_limit: int = 6000
    group_drop_logs: bool = True
    group_reset_rate_s: int | None = None
    group_warning_delay_s: int = 10
    group_emit_metrics: bool = False
    labels: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ThrottleSettings:
    """Validated configuration consumed by the composition root."""

    group_key: tuple[str, ...]
    bucket_period_s: int
    bucket_limit: int
    drop_logs: bool
    reset_rate_s: int
    warning_delay_s: int
    emit_metrics: bool
    base_labels: Mapping[str, str]

    @property
    def rate_limit_s(self) -> int:
        """Return the sustained records/second a group may emit."""

        return self.bucket_limit // self.bucket_period_s

    @property
    def gc_timeout_s(self) -> int:
        """Return the idle time after which a group's state may be evicted."""

        return 2 * self.bucket_period_s


def build_throttle_settings(
    config: ThrottleConfig | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    hostname: str | None = None,
    worker_id: int = 0,
) -> ThrottleSettings:
    """Resolve ``config`` and environment overrides into validated settings.

    Examples
    --------
    >>> settings = build_throttle_settings(ThrottleConfig(group_bucket_period_s=60, group_bucket_limit=120), environ={})
    >>> settings.reset_rate_s, settings.gc_timeout_s
    (2, 120)
    >>> build_throttle_settings(ThrottleConfig(group_bucket_limit=0), environ={})
    Traceback (most recent call last):
    ...
    ValueError: group_bucket_limit must be > 0
    """

    config = config or ThrottleConfig()
    env = os.environ if environ is None else environ

    configured_key = (config.group_key,) if isinstance(config.group_key, str) else tuple(config.group_key)
    group_key = _group_key_from_env(env.get(ENV_GROUP_KEY)) or configured_key
    period = _int_from_env(env, ENV_BUCKET_PERIOD, config.group_bucket_period_s)
    limit = _int_from_env(env, ENV_BUCKET_LIMIT, config.group_bucket_limit)
    drop_logs = _bool_from_env(env, ENV_DROP_LOGS, config.group_drop_logs)
    reset_rate = _optional_int_from_env(env, ENV_RESET_RATE, config.group_reset_rate_s)
    warning_delay = _int_from_env(env, ENV_WARNING_DELAY, config.group_warning_delay_s)
    emit_metrics = _bool_from_env(env, ENV_EMIT_METRICS, config.group_emit_metrics)

    if not group_key or any(not path.strip() for path in group_key):
        raise ValueError("group_key must contain at least one non-empty field path")
    if period <= 0:
        raise ValueError("group_bucket_period_s must be > 0")
    if limit <= 0:
        raise ValueError("group_bucket_limit must be > 0")

    rate_limit = limit // period
    if reset_rate is None:
        reset_rate = rate_limit
    if reset_rate < HYSTERESIS_DISABLED:
        raise ValueError("group_reset_rate_s must be >= -1")
    if reset_rate > rate_limit:
        raise ValueError("group_reset_rate_s must be <= group_bucket_limit / group_bucket_period_s")
    if warning_delay < 1:
        raise ValueError("group_warning_delay_s must be >= 1")

    base_labels = resolve_labels(config.labels, hostname=hostname, worker_id=worker_id)

    return ThrottleSettings(
        group_key=group_key,
        bucket_period_s=period,
        bucket_limit=limit,
        drop_logs=drop_logs,
        reset_rate_s=reset_rate,
        warning_delay_s=warning_delay,
        emit_metrics=emit_metrics,
        base_labels=base_labels,
    )


def _group_key_from_env(raw: str | None) -> tuple[str, ...]:
    if raw is None or not raw.strip():
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return int(default)
    return _parse_int(name, raw)


def _optional_int_from_env(env: Mapping[str, str], name: str, default: int | None) -> int | None:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None if default is None else int(default)
    return _parse_int(name, raw)


def _bool_from_env(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return bool(default)
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {raw!r}")


__all__ = [
    "DEFAULT_GROUP_KEY",
    "ENV_BUCKET_LIMIT",
    "ENV_BUCKET_PERIOD",
    "ENV_DROP_LOGS",
    "ENV_EMIT_METRICS",
    "ENV_GROUP_KEY",
    "ENV_RESET_RATE",
    "ENV_WARNING_DELAY",
    "ThrottleConfig",
    "ThrottleSettings",
    "build_throttle_settings",
]
