"""Access-ordered store of group states.

Purpose
-------
Keep one :class:`GroupState` per group key, ordered from least to most
recently touched so the eviction policy can inspect the oldest entry in O(1).

Contents
--------
* :class:`GroupStore` - ``OrderedDict`` wrapper with move-to-end semantics.

System Role
-----------
Exclusive owner of all group state. Other components receive states for the
duration of a single record and never keep references across calls.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Iterator

from .group_key import GroupKey
from .group_state import GroupState


class GroupStore:
    """Least-recently-touched ordering over per-group state.

    Examples
    --------
    >>> store = GroupStore(bucket_limit=10)
    >>> _ = store.touch(("a",), now=0.0)
    >>> _ = store.touch(("b",), now=0.0)
    >>> _ = store.touch(("a",), now=1.0)
    >>> store.oldest()[0]
    ('b',)
    >>> len(store)
    2
    """

    def __init__(self, *, bucket_limit: int) -> None:
        self._bucket_limit = bucket_limit
        self._entries: OrderedDict[GroupKey, GroupState] = OrderedDict()

    def touch(self, key: GroupKey, *, now: float) -> GroupState:
        """Return the state for ``key``, creating it when absent, and mark it most recent."""

        state = self._entries.get(key)
        if state is None:
            state = GroupState.fresh(now, bucket_limit=self._bucket_limit)
            self._entries[key] = state
        else:
            self._entries.move_to_end(key)
        return state

    def oldest(self) -> tuple[GroupKey, GroupState] | None:
        """Return the least recently touched entry without removing it."""

        if not self._entries:
            return None
        key = next(iter(self._entries))
        return key, self._entries[key]

    def evict(self, key: GroupKey) -> None:
        """Drop ``key`` from the store; unknown keys are ignored."""

        self._entries.pop(key, None)

    def get(self, key: GroupKey) -> GroupState | None:
        """Return the state for ``key`` without changing its position."""

        return self._entries.get(key)

    def items(self) -> Iterator[tuple[GroupKey, GroupState]]:
        """Iterate entries from least to most recently touched."""
        return iter(self._entries.items())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[GroupKey]:
        """Iterate keys from least to most recently touched."""
        return iter(self._entries)


__all__ = ["GroupStore"]
