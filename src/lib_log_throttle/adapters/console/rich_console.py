"""Rich-powered console adapter implementing :class:`LoggerPort`.

Purpose
-------
Show throttle notifications to operators running the command line filter.
Output goes to stderr so accepted records on stdout stay machine readable.

Contents
--------
* :data:`_STYLE_MAP` - default level-to-style mapping.
* :class:`RichConsoleLogger` - adapter constructed by the CLI.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, MutableMapping

from rich.console import Console

from lib_log_throttle.application.ports.logger import LoggerPort

from .._formatting import format_line

_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING")

#: Default Rich styles keyed by level name.
_STYLE_MAP: Mapping[str, str] = {
    "DEBUG": "dim",
    "INFO": "cyan",
    "WARNING": "yellow",
}


class RichConsoleLogger(LoggerPort):
    """Render notifier messages using Rich.

    Parameters
    ----------
    console:
        Console to print to; defaults to a stderr console.
    min_level:
        Lowest level printed (``"DEBUG"``, ``"INFO"`` or ``"WARNING"``).
    no_color:
        Disable styling entirely.
    styles:
        Per-level style overrides merged over :data:`_STYLE_MAP`.

    Examples
    --------
    >>> from io import StringIO
    >>> console = Console(file=StringIO(), record=True)
    >>> adapter = RichConsoleLogger(console=console)
    >>> adapter.warning("rate exceeded", {"group_key": ("api",), "rate_s": 5})
    >>> "rate exceeded group_key=[api] rate_s=5" in console.export_text()
    True
    """

    def __init__(
        self,
        *,
        console: Console | None = None,
        min_level: str = "INFO",
        no_color: bool = False,
        styles: MutableMapping[str, str] | None = None,
    ) -> None:
        self._console = console if console is not None else Console(stderr=True, no_color=no_color)
        level = min_level.strip().upper()
        if level not in _LEVELS:
            raise ValueError(f"Unknown log level: {min_level!r}")
        self._min_index = _LEVELS.index(level)
        self._no_color = no_color
        merged = dict(_STYLE_MAP)
        if styles:
            merged.update({key.upper(): value for key, value in styles.items()})
        self._style_map = merged

    def debug(self, message: str, fields: Mapping[str, Any]) -> None:
        self._emit("DEBUG", message, fields)

    def info(self, message: str, fields: Mapping[str, Any]) -> None:
        self._emit("INFO", message, fields)

    def warning(self, message: str, fields: Mapping[str, Any]) -> None:
        self._emit("WARNING", message, fields)

    def _emit(self, level: str, message: str, fields: Mapping[str, Any]) -> None:
        if _LEVELS.index(level) < self._min_index:
            return
        style = "" if self._no_color else self._style_map.get(level, "")
        timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
        line = f"{timestamp} {level:>7} {format_line(message, fields)}"
        self._console.print(line, style=style, highlight=False, markup=False, soft_wrap=True)


__all__ = ["RichConsoleLogger"]
