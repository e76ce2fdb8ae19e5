"""Group key extraction from nested records.

Purpose
-------
Turn configured dotted field paths into the composite key that partitions the
record stream into independently throttled groups.

Contents
--------
* :data:`GroupKey` - tuple alias describing an extracted key.
* :class:`GroupKeyExtractor` - walks records along pre-split paths.
* :func:`sanitize_label_name` - maps a dotted path to a metric label name.

System Role
-----------
First step of the per-record pipeline; everything downstream (store, limiter,
notifier) is keyed by the tuple produced here.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence, Set as AbstractSet
from typing import Any, Hashable, Tuple

GroupKey = Tuple[Hashable, ...]

_LABEL_INVALID = re.compile(r"[^a-zA-Z0-9_]")
_MISSING = object()


def sanitize_label_name(path: str) -> str:
    """Return ``path`` with every character outside ``[a-zA-Z0-9_]`` replaced.

    Examples
    --------
    >>> sanitize_label_name("kubernetes.container_name")
    'kubernetes_container_name'
    """

    return _LABEL_INVALID.sub("_", path)


def _freeze(value: Any) -> Hashable:
    """Return a hashable rendition of ``value`` so it can live inside a key."""
    if isinstance(value, Mapping):
        return frozenset((_freeze(k), _freeze(v)) for k, v in value.items())
    if isinstance(value, AbstractSet):
        return frozenset(_freeze(item) for item in value)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, bytearray):
        return bytes(value)
    return value


class GroupKeyExtractor:
    """Derive a :data:`GroupKey` from a record.

    Parameters
    ----------
    paths:
        Ordered dotted field paths (``"kubernetes.container_name"``). The
        order and arity of the produced keys follow this sequence.

    Examples
    --------
    >>> extractor = GroupKeyExtractor(["kubernetes.container_name", "level"])
    >>> extractor.extract({"kubernetes": {"container_name": "api"}})
    ('api', None)
    >>> extractor.extract({b"kubernetes": {b"container_name": "worker"}, "level": "info"})
    ('worker', 'info')
    """

    def __init__(self, paths: Sequence[str]) -> None:
        if not paths:
            raise ValueError("group_key must name at least one field")
        self._paths: tuple[str, ...] = tuple(paths)
        self._segments: tuple[tuple[str, ...], ...] = tuple(tuple(path.split(".")) for path in self._paths)
        self._raw_segments: tuple[tuple[bytes, ...], ...] = tuple(
            tuple(segment.encode("utf-8") for segment in segments) for segments in self._segments
        )

    @property
    def label_names(self) -> tuple[str, ...]:
        """Return the paths sanitised to metric label identifiers."""

        return tuple(sanitize_label_name(path) for path in self._paths)

    def extract(self, record: Mapping[Any, Any]) -> GroupKey:
        """Return one value per configured path; missing fields become ``None``."""

        return tuple(
            self._lookup(record, segments, raw) for segments, raw in zip(self._segments, self._raw_segments)
        )

    def _lookup(self, record: Mapping[Any, Any], segments: tuple[str, ...], raw: tuple[bytes, ...]) -> Hashable:
        value = _dig(record, segments)
        if value is _MISSING:
            value = _dig(record, raw)
        if value is _MISSING:
            return None
        return _freeze(value)


def _dig(record: Any, segments: Sequence[Any]) -> Any:
    current = record
    for segment in segments:
        if not isinstance(current, Mapping):
            return _MISSING
        current = current.get(segment, _MISSING)
        if current is _MISSING or current is None:
            return _MISSING
    return current


__all__ = ["GroupKey", "GroupKeyExtractor", "sanitize_label_name"]
