"""Best-effort eviction of idle group state."""

from __future__ import annotations

from .group_key import GroupKey
from .group_store import GroupStore


class EvictionPolicy:
    """Evict the least recently touched group once it has been idle too long.

    Only the single oldest entry is examined per call, which keeps the cost per
    record constant. Idle groups hidden behind a recently touched oldest entry
    survive until they surface, so the store size is not strictly bounded.

    Examples
    --------
    >>> store = GroupStore(bucket_limit=5)
    >>> _ = store.touch(("idle",), now=0.0)
    >>> _ = store.touch(("busy",), now=200.0)
    >>> EvictionPolicy(idle_timeout_s=120).sweep(store, now=200.0)
    ('idle',)
    >>> len(store)
    1
    """

    def __init__(self, *, idle_timeout_s: float) -> None:
        self._idle_timeout_s = idle_timeout_s

    @property
    def idle_timeout_s(self) -> float:
        return self._idle_timeout_s

    def sweep(self, store: GroupStore, now: float) -> GroupKey | None:
        """Evict the oldest entry if idle past the timeout; return its key."""

        candidate = store.oldest()
        if candidate is None:
            return None
        key, state = candidate
        if now - state.rate_last_reset > self._idle_timeout_s:
            store.evict(key)
            return key
        return None


__all__ = ["EvictionPolicy"]
