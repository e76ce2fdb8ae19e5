"""Runtime façade: configuration resolution and filter composition.

Hosts call :func:`create_throttle_filter` once per worker and feed every record
to :meth:`FilterStage.process`. Each returned filter owns its group state; only
the counter registry may be shared between instances.
"""

from __future__ import annotations

from ._composition import build_filter_stage, create_throttle_filter
from ._settings import ThrottleConfig, ThrottleSettings, build_throttle_settings

__all__ = [
    "ThrottleConfig",
    "ThrottleSettings",
    "build_filter_stage",
    "build_throttle_settings",
    "create_throttle_filter",
]
