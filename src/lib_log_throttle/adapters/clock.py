"""System clock adapter implementing :class:`ClockPort`."""

from __future__ import annotations

from datetime import datetime, timezone

from lib_log_throttle.application.ports.time import ClockPort


class SystemClock(ClockPort):
    """Return the current UTC time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


__all__ = ["SystemClock"]
