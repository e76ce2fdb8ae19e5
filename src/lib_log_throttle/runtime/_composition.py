"""Composition root wiring settings, domain policies, and adapters.

Purpose
-------
Build a ready-to-use :class:`FilterStage` from :class:`ThrottleSettings`.
Collaborators (logger, counter registry, clock) are injected; defaults are the
stdlib logging sink, the process-wide in-memory registry, and the system clock.
"""

from __future__ import annotations

from collections.abc import Mapping

from lib_log_throttle.adapters import SystemClock, StdlibLoggerAdapter, default_registry
from lib_log_throttle.application.ports import ClockPort, CounterRegistryPort, LoggerPort
from lib_log_throttle.application.use_cases import FilterStage, Notifier
from lib_log_throttle.domain import BucketLimiter, EvictionPolicy, GroupKeyExtractor, GroupStore, RateEstimator

from ._settings import ThrottleConfig, ThrottleSettings, build_throttle_settings


def build_filter_stage(
    settings: ThrottleSettings,
    *,
    logger: LoggerPort | None = None,
    registry: CounterRegistryPort | None = None,
    clock: ClockPort | None = None,
) -> FilterStage:
    """Assemble a :class:`FilterStage` from resolved ``settings``."""

    log = logger or StdlibLoggerAdapter()
    metrics = (registry or default_registry) if settings.emit_metrics else None
    extractor = GroupKeyExtractor(settings.group_key)
    notifier = Notifier(
        logger=log,
        bucket_period_s=settings.bucket_period_s,
        bucket_limit=settings.bucket_limit,
        rate_limit_s=settings.rate_limit_s,
        reset_rate_s=settings.reset_rate_s,
        warning_delay_s=settings.warning_delay_s,
        registry=metrics,
        base_labels=settings.base_labels,
        group_label_names=extractor.label_names,
    )
    limiter = BucketLimiter(
        bucket_period_s=settings.bucket_period_s,
        bucket_limit=settings.bucket_limit,
        reset_rate_s=settings.reset_rate_s,
        listener=notifier,
    )
    return FilterStage(
        extractor=extractor,
        store=GroupStore(bucket_limit=settings.bucket_limit),
        rate_estimator=RateEstimator(bucket_limit=settings.bucket_limit),
        eviction=EvictionPolicy(idle_timeout_s=settings.gc_timeout_s),
        limiter=limiter,
        clock=clock or SystemClock(),
        drop_records=settings.drop_logs,
        log=log,
    )


def create_throttle_filter(
    config: ThrottleConfig | None = None,
    *,
    logger: LoggerPort | None = None,
    registry: CounterRegistryPort | None = None,
    clock: ClockPort | None = None,
    environ: Mapping[str, str] | None = None,
    hostname: str | None = None,
    worker_id: int = 0,
) -> FilterStage:
    """Validate ``config`` and return a filter ready to process records.

    Raises
    ------
    ValueError
        When the configuration violates a range or label constraint.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> stage = create_throttle_filter(ThrottleConfig(group_key=["app"], group_bucket_limit=1), environ={})
    >>> now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    >>> stage.process({"app": "api"}, now=now)
    {'app': 'api'}
    >>> stage.process({"app": "api"}, now=now) is None
    True
    """

    settings = build_throttle_settings(config, environ=environ, hostname=hostname, worker_id=worker_id)
    return build_filter_stage(settings, logger=logger, registry=registry, clock=clock)


__all__ = ["build_filter_stage", "create_throttle_filter"]
