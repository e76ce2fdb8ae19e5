"""Render structured notifier fields as ``key=value`` text.

Why
---
The stdlib logging sink and the Rich console print the same payloads. Producing
the text in one place keeps both outputs identical.

Contents
--------
* :func:`format_value` - render one field value.
* :func:`format_fields` - join a payload into ``key=value`` pairs.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def format_value(value: Any) -> str:
    """Return the text shown for ``value``.

    Examples
    --------
    >>> format_value(("api", None))
    '[api,-]'
    >>> format_value(float("inf"))
    'inf'
    """

    if value is None:
        return "-"
    if isinstance(value, tuple):
        return "[" + ",".join(format_value(item) for item in value) + "]"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, float) and math.isinf(value):
        return "inf"
    return str(value)


def format_fields(fields: Mapping[str, Any]) -> str:
    """Return ``fields`` as space separated ``key=value`` pairs in insertion order.

    Examples
    --------
    >>> format_fields({"group_key": ("api",), "rate_s": 3})
    'group_key=[api] rate_s=3'
    """

    return " ".join(f"{key}={format_value(value)}" for key, value in fields.items())


def format_line(message: str, fields: Mapping[str, Any]) -> str:
    """Return ``message`` followed by its rendered fields."""

    rendered = format_fields(fields)
    return f"{message} {rendered}" if rendered else message


__all__ = ["format_fields", "format_line", "format_value"]
