"""Stdlib :mod:`logging` adapter implementing :class:`LoggerPort`.

Purpose
-------
Forward notifier messages to a regular :class:`logging.Logger` so hosts can
route throttle warnings through their existing handlers.

System Role
-----------
Default sink wired by :func:`lib_log_throttle.runtime.create_throttle_filter`.
The raw fields travel in ``extra={"throttle": ...}`` for structured handlers;
the rendered message carries them as ``key=value`` text for plain ones.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from lib_log_throttle.application.ports.logger import LoggerPort

from ._formatting import format_line

DEFAULT_LOGGER_NAME = "lib_log_throttle.throttle"


class StdlibLoggerAdapter(LoggerPort):
    """Emit notifier messages through :mod:`logging`.

    Examples
    --------
    >>> import logging
    >>> adapter = StdlibLoggerAdapter(logging.getLogger("doctest.throttle"))
    >>> adapter.info("rate back down", {"group_key": ("api",)})
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def debug(self, message: str, fields: Mapping[str, Any]) -> None:
        self._log(logging.DEBUG, message, fields)

    def info(self, message: str, fields: Mapping[str, Any]) -> None:
        self._log(logging.INFO, message, fields)

    def warning(self, message: str, fields: Mapping[str, Any]) -> None:
        self._log(logging.WARNING, message, fields)

    def _log(self, level: int, message: str, fields: Mapping[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, "%s", format_line(message, fields), extra={"throttle": dict(fields)})


__all__ = ["DEFAULT_LOGGER_NAME", "StdlibLoggerAdapter"]
