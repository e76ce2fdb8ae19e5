"""Domain entities and policies of the per-group throttle."""

from __future__ import annotations

from .bucket import HYSTERESIS_DISABLED, BucketLimiter, TransitionListener
from .eviction import EvictionPolicy
from .group_key import GroupKey, GroupKeyExtractor, sanitize_label_name
from .group_state import BucketState, Exceeded, GroupState, Normal
from .group_store import GroupStore
from .rate import RateEstimator, round_half_up

__all__ = [
    "BucketLimiter",
    "BucketState",
    "EvictionPolicy",
    "Exceeded",
    "GroupKey",
    "GroupKeyExtractor",
    "GroupState",
    "GroupStore",
    "HYSTERESIS_DISABLED",
    "Normal",
    "RateEstimator",
    "TransitionListener",
    "round_half_up",
    "sanitize_label_name",
]
