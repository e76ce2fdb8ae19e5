"""Port for the leveled, structured log sink used by the notifier."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LoggerPort(Protocol):
    """Accept leveled messages with structured fields."""

    def debug(self, message: str, fields: Mapping[str, Any]) -> None: ...

    def info(self, message: str, fields: Mapping[str, Any]) -> None: ...

    def warning(self, message: str, fields: Mapping[str, Any]) -> None: ...


__all__ = ["LoggerPort"]
