"""
calwrap.engines.arithmetic
--------------------------
Unit-aware calendar arithmetic on local calendar fields.

Month and year steps clamp the day of month to the target month's length
(Jan 31 + 1 month = Feb 29 in a leap year) instead of rolling over.
ISO week numbering follows the Thursday rule, while start_of/end_of('week')
use Sunday as the first day of the week. The two conventions are kept apart.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Optional

from ..core.config import EngineConfig, resolve
from ..core.errors import InvalidArgumentError
from ..core.time import (
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
    MS_PER_WEEK,
    days_in_month,
    from_jdn,
    iso_weekday_from_jdn,
    join,
    split,
    to_jdn,
)
from ..core.types import Instant

UNITS = ("millisecond", "second", "minute", "hour", "day", "week", "month", "year")
BOUNDARY_UNITS = ("year", "month", "week", "day", "hour")

_FIXED_MS = {
    "millisecond": 1,
    "second": MS_PER_SECOND,
    "minute": MS_PER_MINUTE,
    "hour": MS_PER_HOUR,
    "day": MS_PER_DAY,
    "week": MS_PER_WEEK,
}


def check_amount(amount) -> int:
    """Validate an arithmetic amount; fractional parts truncate toward zero."""
    if isinstance(amount, bool) or not isinstance(amount, Real):
        raise InvalidArgumentError(f"amount must be a real number, got {amount!r}")
    if not math.isfinite(amount):
        raise InvalidArgumentError("amount must be finite")
    return int(amount)


def check_unit(unit: str, allowed=UNITS) -> str:
    if unit not in allowed:
        raise InvalidArgumentError(f"Unsupported unit '{unit}'. Available: {list(allowed)}")
    return unit


def add_ms(epoch_ms: int, amount, unit: str, offset_minutes: int = 0) -> int:
    n = check_amount(amount)
    check_unit(unit)
    if unit in _FIXED_MS:
        return epoch_ms + n * _FIXED_MS[unit]

    f = split(epoch_ms, offset_minutes)
    if unit == "month":
        # Shift from day 1 so a short month in between cannot be skipped.
        total = f.year * 12 + (f.month - 1) + n
        y, m0 = divmod(total, 12)
        day = min(f.day, days_in_month(y, m0 + 1))
        return join(y, m0 + 1, day, f.hour, f.minute, f.second, f.millisecond, offset_minutes)

    # year: clamp against the same month in the new year (Feb 29 -> Feb 28)
    y = f.year + n
    day = min(f.day, days_in_month(y, f.month))
    return join(y, f.month, day, f.hour, f.minute, f.second, f.millisecond, offset_minutes)


def add(instant: Instant, amount, unit: str = "day", *, config: Optional[EngineConfig] = None) -> Instant:
    cfg = resolve(config)
    return Instant(add_ms(instant.require(), amount, unit, cfg.utc_offset_minutes))


def subtract(instant: Instant, amount, unit: str = "day", *, config: Optional[EngineConfig] = None) -> Instant:
    return add(instant, -check_amount(amount), unit, config=config)


def _thursday_jdn(epoch_ms: int, offset_minutes: int) -> int:
    f = split(epoch_ms, offset_minutes)
    jdn = to_jdn(f.year, f.month, f.day)
    return jdn + 4 - iso_weekday_from_jdn(jdn)


def iso_week_ms(epoch_ms: int, offset_minutes: int = 0) -> int:
    thu = _thursday_jdn(epoch_ms, offset_minutes)
    y = from_jdn(thu)[0]
    days_since_jan1 = thu - to_jdn(y, 1, 1)
    return math.ceil((days_since_jan1 + 1) / 7)


def iso_week_year_ms(epoch_ms: int, offset_minutes: int = 0) -> int:
    return from_jdn(_thursday_jdn(epoch_ms, offset_minutes))[0]


def iso_week(instant: Instant, *, config: Optional[EngineConfig] = None) -> int:
    return iso_week_ms(instant.require(), resolve(config).utc_offset_minutes)


def iso_week_year(instant: Instant, *, config: Optional[EngineConfig] = None) -> int:
    return iso_week_year_ms(instant.require(), resolve(config).utc_offset_minutes)


def from_iso_week(year: int, week: int, weekday: int = 1, *, config: Optional[EngineConfig] = None) -> Instant:
    """Local midnight of ISO (year, week, weekday), weekday 1=Monday..7=Sunday."""
    for name, v in (("year", year), ("week", week), ("weekday", weekday)):
        if isinstance(v, bool) or not isinstance(v, int):
            raise InvalidArgumentError(f"{name} must be an int, got {v!r}")
    if not 1 <= weekday <= 7:
        raise InvalidArgumentError(f"weekday must be within 1..7, got {weekday}")
    cfg = resolve(config)
    jan1 = to_jdn(year, 1, 1)
    jan1_dow = iso_weekday_from_jdn(jan1)
    offset = (week - 1) * 7 + (weekday - jan1_dow)
    if jan1_dow > 4:
        # Jan 1 on Fri..Sun belongs to the previous ISO year.
        offset += 7
    return Instant(join(year, 1, 1 + offset, offset_minutes=cfg.utc_offset_minutes))


def start_of_ms(epoch_ms: int, unit: str, offset_minutes: int = 0) -> int:
    check_unit(unit, BOUNDARY_UNITS)
    f = split(epoch_ms, offset_minutes)
    if unit == "year":
        return join(f.year, 1, 1, offset_minutes=offset_minutes)
    if unit == "month":
        return join(f.year, f.month, 1, offset_minutes=offset_minutes)
    if unit == "week":
        return join(f.year, f.month, f.day - f.weekday, offset_minutes=offset_minutes)
    if unit == "day":
        return join(f.year, f.month, f.day, offset_minutes=offset_minutes)
    return join(f.year, f.month, f.day, f.hour, offset_minutes=offset_minutes)


def end_of_ms(epoch_ms: int, unit: str, offset_minutes: int = 0) -> int:
    check_unit(unit, BOUNDARY_UNITS)
    f = split(epoch_ms, offset_minutes)
    if unit == "year":
        return join(f.year, 12, 31, 23, 59, 59, 999, offset_minutes)
    if unit == "month":
        return join(f.year, f.month, days_in_month(f.year, f.month), 23, 59, 59, 999, offset_minutes)
    if unit == "week":
        return join(f.year, f.month, f.day + (6 - f.weekday), 23, 59, 59, 999, offset_minutes)
    if unit == "day":
        return join(f.year, f.month, f.day, 23, 59, 59, 999, offset_minutes)
    return join(f.year, f.month, f.day, f.hour, 59, 59, 999, offset_minutes)


def start_of(instant: Instant, unit: str = "day", *, config: Optional[EngineConfig] = None) -> Instant:
    return Instant(start_of_ms(instant.require(), unit, resolve(config).utc_offset_minutes))


def end_of(instant: Instant, unit: str = "day", *, config: Optional[EngineConfig] = None) -> Instant:
    return Instant(end_of_ms(instant.require(), unit, resolve(config).utc_offset_minutes))


def weekday(instant: Instant, *, config: Optional[EngineConfig] = None) -> int:
    """0=Sunday..6=Saturday in local fields."""
    return split(instant.require(), resolve(config).utc_offset_minutes).weekday
