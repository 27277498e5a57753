import pytest
from datetime import datetime, timezone

from calwrap.core.config import EngineConfig
from calwrap.core.time import join

# Tuesday 2024-03-05 10:30:00 UTC
NOW_MS = int(datetime(2024, 3, 5, 10, 30, tzinfo=timezone.utc).timestamp()) * 1000


def utc_ms(*fields) -> int:
    """Epoch ms for UTC fields (year, month, day[, hour, minute, second, ms])."""
    return join(*fields)


@pytest.fixture
def cfg():
    """UTC config with a frozen clock."""
    return EngineConfig(clock=lambda: NOW_MS)


@pytest.fixture
def cfg_plus_one():
    """UTC+01:00 config with the same frozen clock."""
    return EngineConfig(utc_offset_minutes=60, clock=lambda: NOW_MS)
