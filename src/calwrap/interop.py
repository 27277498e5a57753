"""Optional interop with the `whenever` date-time library."""
from __future__ import annotations

from typing import Any, Optional

from .core.config import EngineConfig, resolve
from .core.errors import UnsupportedError
from .core.time import join
from .core.types import Instant
from .wrapper import DateWrapper


def _need_whenever():
    try:
        import whenever
        return whenever
    except ImportError as e:
        raise UnsupportedError('Need whenever. Install: pip install "calwrap[interop]"') from e


def _to_millis(obj) -> int:
    try:
        return int(obj.timestamp(unit="millisecond"))
    except TypeError:
        # releases before the unit-based timestamp API
        return obj.timestamp_millis()


def to_whenever(w: DateWrapper):
    """whenever.Instant at the same millisecond."""
    whenever = _need_whenever()
    try:
        return whenever.Instant.from_timestamp(w.epoch_ms, unit="millisecond")
    except TypeError:
        return whenever.Instant.from_timestamp_millis(w.epoch_ms)


def from_whenever(obj: Any, *, config: Optional[EngineConfig] = None) -> DateWrapper:
    """
    Accepts exact-time objects (Instant, OffsetDateTime, ZonedDateTime) and
    PlainDateTime, whose fields are read in the configured local offset.
    """
    whenever = _need_whenever()
    cfg = resolve(config)
    exact = tuple(getattr(whenever, n) for n in ("Instant", "OffsetDateTime", "ZonedDateTime") if hasattr(whenever, n))
    if isinstance(obj, exact):
        return DateWrapper(Instant(_to_millis(obj)), config=cfg)
    plain = getattr(whenever, "PlainDateTime", None)
    if plain is not None and isinstance(obj, plain):
        ms = join(obj.year, obj.month, obj.day, obj.hour, obj.minute, obj.second,
                  obj.nanosecond // 1_000_000, cfg.utc_offset_minutes)
        return DateWrapper(Instant(ms), config=cfg)
    raise UnsupportedError(f"Unsupported whenever object: {type(obj).__name__}")
