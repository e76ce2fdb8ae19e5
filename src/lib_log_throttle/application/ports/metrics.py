"""Ports for the counter registry fed by the notifier."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class CounterPort(Protocol):
    """Monotonic counter partitioned by label values."""

    def increment(self, by: float, labels: Mapping[str, str]) -> None:
        """Add ``by`` to the series identified by ``labels``."""

    def get(self, labels: Mapping[str, str]) -> float:
        """Return the current value of the series identified by ``labels``."""


@runtime_checkable
class CounterRegistryPort(Protocol):
    """Create counters on demand and hand back cached instances by name."""

    def get_or_create(self, name: str, documentation: str, label_names: Sequence[str]) -> CounterPort: ...


__all__ = ["CounterPort", "CounterRegistryPort"]
