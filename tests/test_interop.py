# tests/test_interop.py

import sys
from unittest.mock import patch

import pytest

from calwrap import DateWrapper, EngineConfig
from calwrap.core.errors import UnsupportedError
from calwrap.interop import from_whenever, to_whenever

from conftest import utc_ms


def test_missing_library_is_reported():
    w = DateWrapper(0)
    with patch.dict(sys.modules, {"whenever": None}):
        with pytest.raises(UnsupportedError):
            to_whenever(w)


@pytest.mark.filterwarnings("error::DeprecationWarning")
def test_instant_roundtrip():
    whenever = pytest.importorskip("whenever")
    w = DateWrapper(utc_ms(2024, 3, 5, 10, 30, 0, 123))
    inst = to_whenever(w)
    assert isinstance(inst, whenever.Instant)
    assert inst == whenever.Instant.from_utc(2024, 3, 5, 10, 30, nanosecond=123_000_000)
    assert from_whenever(inst) == w


def test_plain_datetime_reads_local_offset():
    whenever = pytest.importorskip("whenever")
    cfg = EngineConfig(utc_offset_minutes=60)
    plain = whenever.PlainDateTime(2024, 3, 5, 11, 30)
    assert from_whenever(plain, config=cfg).epoch_ms == utc_ms(2024, 3, 5, 10, 30)


def test_unsupported_object():
    pytest.importorskip("whenever")
    with pytest.raises(UnsupportedError):
        from_whenever("2024-03-05")
