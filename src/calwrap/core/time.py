"""
calwrap.core.time
-----------------
Epoch-millisecond <-> calendar field conversions.

Every computation in the engine runs on integer epoch milliseconds (UTC).
"Local" fields are read through a fixed UTC offset in minutes; the day number
arithmetic goes through the Julian Day Number so it is valid far outside the
range of :mod:`datetime`.
"""

from __future__ import annotations

from dataclasses import dataclass

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR
MS_PER_WEEK = 7 * MS_PER_DAY

# JDN of 1970-01-01
JDN_UNIX_EPOCH = 2440588

# Same limit as ECMAScript time values: +-100,000,000 days around the epoch.
MAX_EPOCH_MS = 8_640_000_000_000_000

MONTH_NAMES_LONG = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
MONTH_NAMES_SHORT = tuple(m[:3] for m in MONTH_NAMES_LONG)
WEEKDAY_NAMES_LONG = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
WEEKDAY_NAMES_SHORT = tuple(w[:3] for w in WEEKDAY_NAMES_LONG)


@dataclass(frozen=True)
class Fields:
    year: int
    month: int  # 1..12
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    millisecond: int = 0
    weekday: int = 0  # 0=Sunday..6=Saturday


def is_leap_year(y: int) -> bool:
    return (y % 4 == 0 and y % 100 != 0) or (y % 400 == 0)


def days_in_month(y: int, m: int) -> int:
    if m == 2:
        return 29 if is_leap_year(y) else 28
    if m in (4, 6, 9, 11):
        return 30
    return 31


def to_jdn(y: int, m: int, day: int) -> int:
    """Gregorian date to Julian Day Number. `day` may overflow the month (linear)."""
    a = (14 - m) // 12
    y2 = y + 4800 - a
    m2 = m + 12 * a - 3
    return day + (153 * m2 + 2) // 5 + 365 * y2 + y2 // 4 - y2 // 100 + y2 // 400 - 32045


def from_jdn(jdn: int) -> tuple[int, int, int]:
    """Fliegel-Van Flandern inverse of to_jdn (Gregorian)."""
    a = jdn + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + (m // 10)
    return year, month, day


def weekday_from_jdn(jdn: int) -> int:
    """0=Sunday..6=Saturday."""
    return (jdn + 1) % 7


def iso_weekday_from_jdn(jdn: int) -> int:
    """1=Monday..7=Sunday."""
    return weekday_from_jdn(jdn) or 7


def split(epoch_ms: int, offset_minutes: int = 0) -> Fields:
    """Break an instant into local calendar fields."""
    local = epoch_ms + offset_minutes * MS_PER_MINUTE
    days, rem = divmod(local, MS_PER_DAY)
    jdn = days + JDN_UNIX_EPOCH
    y, m, d = from_jdn(jdn)
    hour, rem = divmod(rem, MS_PER_HOUR)
    minute, rem = divmod(rem, MS_PER_MINUTE)
    second, ms = divmod(rem, MS_PER_SECOND)
    return Fields(y, m, d, hour, minute, second, ms, weekday_from_jdn(jdn))


def join(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
    offset_minutes: int = 0,
) -> int:
    """
    Compose local fields into epoch milliseconds.

    Out-of-range fields roll over into the next larger unit, so
    join(2024, 13, 1) is 2025-01-01 and join(2024, 3, 0) is 2024-02-29.
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    days = to_jdn(year, month, 1) + (day - 1) - JDN_UNIX_EPOCH
    local = (
        days * MS_PER_DAY
        + hour * MS_PER_HOUR
        + minute * MS_PER_MINUTE
        + second * MS_PER_SECOND
        + millisecond
    )
    return local - offset_minutes * MS_PER_MINUTE


def local_midnight(epoch_ms: int, offset_minutes: int = 0) -> int:
    f = split(epoch_ms, offset_minutes)
    return join(f.year, f.month, f.day, offset_minutes=offset_minutes)


def in_range(epoch_ms: int) -> bool:
    return -MAX_EPOCH_MS <= epoch_ms <= MAX_EPOCH_MS
