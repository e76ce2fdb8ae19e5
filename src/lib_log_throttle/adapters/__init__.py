"""Concrete adapters for the throttle ports."""

from __future__ import annotations

from .clock import SystemClock
from .console import RichConsoleLogger
from .labels import PlaceholderExpander, resolve_labels
from .logging_sink import StdlibLoggerAdapter
from .metrics import InMemoryCounter, InMemoryCounterRegistry, default_registry

__all__ = [
    "InMemoryCounter",
    "InMemoryCounterRegistry",
    "PlaceholderExpander",
    "RichConsoleLogger",
    "StdlibLoggerAdapter",
    "SystemClock",
    "default_registry",
    "resolve_labels",
]
