"""Optional ``.env`` loading for command line and host configuration.

Purpose
-------
Let operators keep ``LOG_THROTTLE_*`` overrides in a ``.env`` file next to
their pipeline configuration. Loading is opt-in: via ``--use-dotenv`` or the
:data:`DOTENV_ENV_VAR` toggle.

Contents
--------
* :func:`should_use_dotenv` - decide from CLI flag and environment toggle.
* :func:`enable_dotenv` - load the nearest ``.env`` without overriding values
  already present in the environment.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DOTENV_ENV_VAR = "LOG_THROTTLE_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}

_loaded_path: Path | None = None


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Return whether ``.env`` should be loaded; an explicit flag wins.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` walking upwards; return its path or ``None``.

    Existing environment variables keep precedence over file entries. Repeated
    calls return the path loaded first.
    """

    global _loaded_path
    if _loaded_path is not None:
        return _loaded_path

    candidate = _locate(search_from)
    if candidate is None:
        return None
    load_dotenv(candidate, override=False)
    _loaded_path = candidate
    return candidate


def _locate(search_from: Path | None) -> Path | None:
    if search_from is None:
        found = find_dotenv(usecwd=True)
        return Path(found).resolve() if found else None
    start = search_from.resolve()
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _loaded_path
    _loaded_path = None


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "should_use_dotenv"]
