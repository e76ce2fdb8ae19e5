"""Abstract ports the throttle depends on."""

from __future__ import annotations

from .logger import LoggerPort
from .metrics import CounterPort, CounterRegistryPort
from .time import ClockPort

__all__ = ["ClockPort", "CounterPort", "CounterRegistryPort", "LoggerPort"]
