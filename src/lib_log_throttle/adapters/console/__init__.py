"""Console adapters."""

from __future__ import annotations

from .rich_console import RichConsoleLogger

__all__ = ["RichConsoleLogger"]
