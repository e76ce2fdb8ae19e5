"""Minimal in-process counter registry implementing :class:`CounterRegistryPort`.

Counters are cached by name and guarded by a lock so several filter instances
in one process can feed the same series. Not suitable for multi-process
aggregation; hosts exporting to a metrics backend inject their own registry.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from threading import Lock
from typing import Dict, Tuple

from lib_log_throttle.application.ports.metrics import CounterPort, CounterRegistryPort

LabelValues = Tuple[str, ...]


class InMemoryCounter(CounterPort):
    """Monotonic counter keyed by label values."""

    def __init__(self, name: str, documentation: str, label_names: Sequence[str]) -> None:
        self.name = name
        self.documentation = documentation
        self.label_names: tuple[str, ...] = tuple(label_names)
        self._lock = Lock()
        self._values: Dict[LabelValues, float] = {}

    def increment(self, by: float, labels: Mapping[str, str]) -> None:
        if by < 0:
            raise ValueError("counters can only be incremented by non-negative amounts")
        key = self._label_values(labels)
        with self._lock:
            self._values[key] = self._values.get(key, 0.0) + by

    def get(self, labels: Mapping[str, str]) -> float:
        key = self._label_values(labels)
        with self._lock:
            return self._values.get(key, 0.0)

    def samples(self) -> Dict[LabelValues, float]:
        """Return a copy of every series recorded so far."""

        with self._lock:
            return dict(self._values)

    def _label_values(self, labels: Mapping[str, str]) -> LabelValues:
        unknown = set(labels) - set(self.label_names)
        missing = set(self.label_names) - set(labels)
        if unknown or missing:
            raise ValueError(
                f"labels for {self.name} must be exactly {list(self.label_names)}; got {sorted(labels)}",
            )
        return tuple(str(labels[name]) for name in self.label_names)


class InMemoryCounterRegistry(CounterRegistryPort):
    """Create counters lazily and return the cached instance on later calls."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._counters: Dict[str, InMemoryCounter] = {}

    def get_or_create(self, name: str, documentation: str, label_names: Sequence[str]) -> InMemoryCounter:
        with self._lock:
            counter = self._counters.get(name)
            if counter is None:
                counter = InMemoryCounter(name, documentation, label_names)
                self._counters[name] = counter
            return counter

    def exists(self, name: str) -> bool:
        with self._lock:
            return name in self._counters

    def snapshot(self) -> Dict[str, Dict[LabelValues, float]]:
        with self._lock:
            counters = dict(self._counters)
        return {name: counter.samples() for name, counter in counters.items()}

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()


default_registry = InMemoryCounterRegistry()


__all__ = ["InMemoryCounter", "InMemoryCounterRegistry", "default_registry"]
