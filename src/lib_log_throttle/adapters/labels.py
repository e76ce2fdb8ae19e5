"""Static metric labels resolved once at startup.

Label values may reference ``${hostname}`` and ``${worker_id}``; the
placeholders are expanded when the filter is built and never again.
"""

from __future__ import annotations

import re
import socket
from collections.abc import Mapping
from typing import Any

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


class PlaceholderExpander:
    """Replace ``${name}`` placeholders with fixed values.

    Unknown placeholders are left untouched.

    Examples
    --------
    >>> PlaceholderExpander({"hostname": "node-1", "worker_id": "0"}).expand("${hostname}/${worker_id}/${pod}")
    'node-1/0/${pod}'
    """

    def __init__(self, values: Mapping[str, Any]) -> None:
        self._values = {key: str(value) for key, value in values.items()}

    def expand(self, template: str) -> str:
        return _PLACEHOLDER.sub(lambda match: self._values.get(match.group(1), match.group(0)), template)


def resolve_labels(
    labels: Mapping[str, Any],
    *,
    hostname: str | None = None,
    worker_id: int = 0,
) -> dict[str, str]:
    """Return ``labels`` with placeholders expanded.

    Raises
    ------
    ValueError
        When a label value is not a literal string.
    """

    expander = PlaceholderExpander({"hostname": hostname or socket.gethostname(), "worker_id": worker_id})
    resolved: dict[str, str] = {}
    for key, value in labels.items():
        if not isinstance(value, str):
            raise ValueError(f"label {key!r} must be a literal string; record accessors are not available in metric labels")
        resolved[str(key)] = expander.expand(value)
    return resolved


__all__ = ["PlaceholderExpander", "resolve_labels"]
