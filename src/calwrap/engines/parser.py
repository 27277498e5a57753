"""
calwrap.engines.parser
----------------------
Normalizer and flexible date parser.

The strict tier accepts `YYYY-MM-DD[ T]HH:mm:ss[.fraction][Z|+HH:MM]` and
returns None when the text does not have that shape. Everything else runs
through a fixed chain of fallbacks (keywords, relative phrases, ordinal
weekdays, a generic dateutil parse and the ambiguous numeric D-M-Y / M/D/Y
token). Failure of one tier is silent; only total failure is visible, as the
INVALID instant.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, timezone
from numbers import Real
from typing import Any, Mapping, Optional

from dateutil import parser as dateutil_parser

from ..core.config import EngineConfig, resolve
from ..core.errors import FormatError
from ..core.time import days_in_month, in_range, join, split, weekday_from_jdn, to_jdn
from ..core.types import INVALID, Instant
from .arithmetic import add_ms

logger = logging.getLogger(__name__)

_RFC3339_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})"
    r"(?:[T\s](\d{2}):(\d{2}):(\d{2})(\.\d+)?(Z|[+\-]\d{2}:\d{2})?)?\Z",
    re.ASCII,
)
_IN_RE = re.compile(
    r"^in\s+(\d+)\s+(day|days|month|months|year|years|hour|hours|minute|minutes|second|seconds)$",
    re.ASCII,
)
_WEEKDAYS = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")
_WD = "|".join(_WEEKDAYS)
_NEXT_RE = re.compile(rf"^next\s+({_WD})$")
_ORDINAL_RE = re.compile(rf"^(first|second|third|fourth|last)\s+({_WD})\s+of\s+(next|this|last)\s+month$")
_ORDINALS = {"first": 1, "second": 2, "third": 3, "fourth": 4, "last": -1}
_MONTH_SHIFT = {"next": 1, "this": 0, "last": -1}
_NUMERIC_RE = re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{2,4})$", re.ASCII)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def parse_rfc3339(text: str, *, config: Optional[EngineConfig] = None) -> Optional[Instant]:
    """
    Strict tier. Returns None when the text is not shaped like the profile,
    raises FormatError when it is but a field is out of range.
    Date-only input is midnight UTC; a missing zone means UTC.
    """
    m = _RFC3339_RE.match(text)
    if not m:
        return None
    Y, M, D = int(m.group(1)), int(m.group(2)), int(m.group(3))
    h, mi, s = (int(g) if g is not None else 0 for g in m.group(4, 5, 6))
    frac, tz = m.group(7), m.group(8)

    if not 1 <= M <= 12 or not 1 <= D <= days_in_month(Y, M):
        raise FormatError(f"Invalid calendar date in '{text}'")
    if h > 23 or mi > 59 or s > 59:
        raise FormatError(f"Invalid time of day in '{text}'")

    ms = _round_half_up(float(frac) * 1000) if frac else 0
    utc = join(Y, M, D, h, mi, s, ms)
    if tz and tz != "Z":
        sign = 1 if tz[0] == "+" else -1
        off_h, off_m = int(tz[1:3]), int(tz[4:6])
        if off_h > 23 or off_m > 59:
            raise FormatError(f"Invalid UTC offset in '{text}'")
        utc -= sign * (off_h * 60 + off_m) * 60_000
    return Instant(utc)


def _local_midnight_plus(now_ms: int, days: int, offset: int) -> int:
    f = split(now_ms, offset)
    return join(f.year, f.month, f.day + days, offset_minutes=offset)


def _ordinal_weekday(now_ms: int, ordinal: int, target: int, shift: int, offset: int) -> int:
    base = split(add_ms(now_ms, shift, "month", offset), offset)
    y, m = base.year, base.month
    if ordinal > 0:
        first_wd = weekday_from_jdn(to_jdn(y, m, 1))
        day = 1 + (target - first_wd) % 7 + 7 * (ordinal - 1)
    else:
        last = days_in_month(y, m)
        last_wd = weekday_from_jdn(to_jdn(y, m, last))
        day = last - (last_wd - target) % 7
    return join(y, m, day, offset_minutes=offset)


def _from_datetime(dt: datetime, offset: int) -> int:
    if dt.tzinfo is not None and dt.utcoffset() is not None:
        delta = dt - _EPOCH
        return delta.days * 86_400_000 + delta.seconds * 1000 + delta.microseconds // 1000
    return join(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second, dt.microsecond // 1000, offset)


def _generic(text: str, now_ms: int, offset: int) -> Optional[int]:
    f = split(now_ms, offset)
    try:
        default = datetime(f.year, f.month, f.day)
        dt = dateutil_parser.parse(text, default=default)
        # tzoffset accepts +2500 but utcoffset() rejects anything beyond 24h
        return _from_datetime(dt, offset)
    except (ValueError, OverflowError):
        return None


def _numeric(text: str, offset: int) -> Optional[int]:
    m = _NUMERIC_RE.match(text)
    if not m:
        return None
    a, b, c = int(m.group(1)), int(m.group(2)), int(m.group(3))
    year = 2000 + c if c < 100 else c
    # '/' reads month-first, '-' reads day-first.
    month, day = (a, b) if "/" in text else (b, a)
    if not 1 <= month <= 12 or not 1 <= day <= days_in_month(year, month):
        return None
    return join(year, month, day, offset_minutes=offset)


def _fallback(s: str, now: int, offset: int) -> Optional[int]:
    low = s.lower()
    if low == "now":
        return now
    if low == "today":
        return _local_midnight_plus(now, 0, offset)
    if low == "tomorrow":
        return _local_midnight_plus(now, 1, offset)
    if low == "yesterday":
        return _local_midnight_plus(now, -1, offset)

    m = _IN_RE.match(low)
    if m:
        unit = m.group(2).rstrip("s")
        return add_ms(now, int(m.group(1)), unit, offset)

    m = _NEXT_RE.match(low)
    if m:
        target = _WEEKDAYS.index(m.group(1))
        today = split(now, offset).weekday
        diff = (target - today + 7) % 7 or 7
        return _local_midnight_plus(now, diff, offset)

    m = _ORDINAL_RE.match(low)
    if m:
        return _ordinal_weekday(
            now,
            _ORDINALS[m.group(1)],
            _WEEKDAYS.index(m.group(2)),
            _MONTH_SHIFT[m.group(3)],
            offset,
        )

    if not _NUMERIC_RE.match(s):
        t = _generic(s, now, offset)
        if t is not None:
            return t

    return _numeric(s, offset)


def parse_flexible(text: str, *, config: Optional[EngineConfig] = None) -> Instant:
    cfg = resolve(config)
    s = str(text).strip()

    try:
        strict = parse_rfc3339(s, config=cfg)
    except FormatError as e:
        logger.debug("strict parse rejected %r: %s", s, e)
        return INVALID
    if strict is not None:
        return strict

    t = _fallback(s, cfg.now_ms(), cfg.utc_offset_minutes)
    if t is None:
        logger.debug("no parse tier matched %r", s)
        return INVALID
    if not in_range(t):
        logger.debug("parsed %r outside the representable range", s)
        return INVALID
    return Instant(t)


def normalize(value: Any = None, *, config: Optional[EngineConfig] = None) -> Instant:
    """Coerce any supported input into an Instant. Never raises; may return INVALID."""
    cfg = resolve(config)
    offset = cfg.utc_offset_minutes

    if value is None:
        return Instant(cfg.now_ms())
    if isinstance(value, Instant):
        return value
    inner = getattr(value, "instant", None)
    if isinstance(inner, Instant):
        return inner
    if isinstance(value, datetime):
        return Instant(_from_datetime(value, offset))
    if isinstance(value, date):
        return Instant(join(value.year, value.month, value.day, offset_minutes=offset))
    if isinstance(value, bool):
        return INVALID
    if isinstance(value, Real):
        return _from_number(value)
    if isinstance(value, str):
        return parse_flexible(value, config=cfg)
    if isinstance(value, Mapping):
        if value.get("value"):
            return normalize(value["value"], config=cfg)
        return INVALID
    wrapped = getattr(value, "value", None)
    if wrapped:
        return normalize(wrapped, config=cfg)

    logger.debug("generic coercion of %s", type(value).__name__)
    try:
        return _from_number(float(value))
    except (TypeError, ValueError, OverflowError):
        return INVALID


def _from_number(value: Real) -> Instant:
    if not math.isfinite(value):
        return INVALID
    ms = int(value)
    return Instant(ms) if in_range(ms) else INVALID
