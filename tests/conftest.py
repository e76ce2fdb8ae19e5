from __future__ import annotations

from collections.abc import Iterator
from io import StringIO

import pytest
from rich.console import Console

from lib_log_throttle import config as log_config
from lib_log_throttle.runtime._settings import (
    ENV_BUCKET_LIMIT,
    ENV_BUCKET_PERIOD,
    ENV_DROP_LOGS,
    ENV_EMIT_METRICS,
    ENV_GROUP_KEY,
    ENV_RESET_RATE,
    ENV_WARNING_DELAY,
)

_THROTTLE_ENV = (
    ENV_GROUP_KEY,
    ENV_BUCKET_PERIOD,
    ENV_BUCKET_LIMIT,
    ENV_DROP_LOGS,
    ENV_RESET_RATE,
    ENV_WARNING_DELAY,
    ENV_EMIT_METRICS,
    log_config.DOTENV_ENV_VAR,
)


@pytest.fixture
def record_console() -> Console:
    """Rich console that records output instead of writing to a terminal."""

    return Console(file=StringIO(), record=True, width=200, color_system=None)


@pytest.fixture(autouse=True)
def clean_throttle_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _THROTTLE_ENV:
        monkeypatch.delenv(name, raising=False)
    log_config._reset_dotenv_state_for_testing()
    yield
    log_config._reset_dotenv_state_for_testing()
