"""
calwrap.wrapper
---------------
DateWrapper: the immutable value type that composes the engines.

Every operation that would move the date returns a new DateWrapper; the
receiver is never modified. Calendar fields are read through the fixed UTC
offset of the wrapper's EngineConfig.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from functools import total_ordering
from typing import Any, Optional, Union

from .core.config import DateTimeFormatter, EngineConfig, RelativeTimeFormatter, resolve
from .core.errors import InvalidArgumentError, InvalidInputError, UnsupportedError
from .core.time import (
    MONTH_NAMES_LONG,
    MONTH_NAMES_SHORT,
    WEEKDAY_NAMES_LONG,
    WEEKDAY_NAMES_SHORT,
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
    MS_PER_WEEK,
    days_in_month as _days_in_month,
    in_range,
    is_leap_year as _is_leap_year,
    split,
)
from .core.types import Instant, RecurrenceRule
from .engines import arithmetic as arith
from .engines.astro.moon import moon_phase_fraction
from .engines.astro.sun import Location, sunrise_ms, sunset_ms
from .engines.business import BusinessCalendar
from .engines.duration import Duration
from .engines.parser import normalize
from .engines.ranges import DateRange
from .engines.recurrence import Recurrence
from .engines.relative import fallback_phrase, pick_unit

_FORMAT_RE = re.compile(r"YYYY|YY|MMMM|MMM|MM|M|DD|D|dddd|ddd|HH|H|hh|h|mm|m|ss|s|SSS|A|a")

_DIFF_MS = {
    "millisecond": 1,
    "second": MS_PER_SECOND,
    "minute": MS_PER_MINUTE,
    "hour": MS_PER_HOUR,
    "day": MS_PER_DAY,
    "week": MS_PER_WEEK,
}

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // b
    return q if a >= 0 else -q


@total_ordering
class DateWrapper:
    __slots__ = ("_instant", "_config")

    def __init__(self, value: Any = None, *, config: Optional[EngineConfig] = None):
        cfg = resolve(config)
        if config is None and isinstance(value, DateWrapper):
            cfg = value.config
        inst = normalize(value, config=cfg)
        if not inst.is_valid or not in_range(inst.epoch_ms):
            raise InvalidInputError(f"Invalid date input: {value!r}")
        self._instant = inst
        self._config = cfg

    # ---------------------------------------------------------
    # Construction / access
    # ---------------------------------------------------------

    @classmethod
    def from_instant(cls, instant: Instant, *, config: Optional[EngineConfig] = None) -> "DateWrapper":
        return cls(instant, config=config)

    @classmethod
    def from_iso_week(cls, year: int, week: int, weekday: int = 1, *, config: Optional[EngineConfig] = None) -> "DateWrapper":
        return cls(arith.from_iso_week(year, week, weekday, config=config), config=config)

    def _new(self, epoch_ms: int) -> "DateWrapper":
        return DateWrapper(Instant(epoch_ms), config=self._config)

    def _other_ms(self, other: Any) -> int:
        if isinstance(other, DateWrapper):
            return other.epoch_ms
        inst = normalize(other, config=self._config)
        if not inst.is_valid:
            raise InvalidInputError(f"Invalid other date: {other!r}")
        return inst.epoch_ms

    @property
    def instant(self) -> Instant:
        return self._instant

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def epoch_ms(self) -> int:
        return self._instant.epoch_ms

    @property
    def _offset(self) -> int:
        return self._config.utc_offset_minutes

    def is_valid(self) -> bool:
        return self._instant.is_valid

    def to_datetime(self) -> datetime:
        """Aware datetime in the wrapper's fixed offset."""
        tz = timezone(timedelta(minutes=self._offset))
        return (_EPOCH + timedelta(milliseconds=self.epoch_ms)).astimezone(tz)

    def to_rfc3339(self) -> str:
        f = split(self.epoch_ms)
        return (f"{f.year:04d}-{f.month:02d}-{f.day:02d}T"
                f"{f.hour:02d}:{f.minute:02d}:{f.second:02d}.{f.millisecond:03d}Z")

    def __int__(self) -> int:
        return self.epoch_ms

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateWrapper):
            return NotImplemented
        return self.epoch_ms == other.epoch_ms

    def __lt__(self, other: "DateWrapper") -> bool:
        if not isinstance(other, DateWrapper):
            return NotImplemented
        return self.epoch_ms < other.epoch_ms

    def __hash__(self) -> int:
        return hash(self.epoch_ms)

    def __repr__(self) -> str:
        return f"DateWrapper('{self.to_rfc3339()}')"

    def __str__(self) -> str:
        return self.to_rfc3339()

    # ---------------------------------------------------------
    # Formatting
    # ---------------------------------------------------------

    def format(self, fmt: str = "YYYY-MM-DD") -> str:
        f = split(self.epoch_ms, self._offset)
        h12 = f.hour % 12 or 12
        tokens = {
            "YYYY": str(f.year), "YY": str(f.year)[-2:],
            "MMMM": MONTH_NAMES_LONG[f.month - 1], "MMM": MONTH_NAMES_SHORT[f.month - 1],
            "MM": f"{f.month:02d}", "M": str(f.month),
            "DD": f"{f.day:02d}", "D": str(f.day),
            "dddd": WEEKDAY_NAMES_LONG[f.weekday], "ddd": WEEKDAY_NAMES_SHORT[f.weekday],
            "HH": f"{f.hour:02d}", "H": str(f.hour),
            "hh": f"{h12:02d}", "h": str(h12),
            "mm": f"{f.minute:02d}", "m": str(f.minute),
            "ss": f"{f.second:02d}", "s": str(f.second),
            "SSS": f"{f.millisecond:03d}",
            "A": "AM" if f.hour < 12 else "PM", "a": "am" if f.hour < 12 else "pm",
        }
        return _FORMAT_RE.sub(lambda m: tokens[m.group(0)], str(fmt))

    def format_locale(
        self,
        locale: Optional[str] = None,
        formatter: Optional[DateTimeFormatter] = None,
        **options: Any,
    ) -> str:
        """Render through a locale formatter (argument or config) in the wrapper's offset."""
        fmt = formatter or self._config.datetime_formatter
        if fmt is None:
            raise UnsupportedError("No locale date-time formatter is configured")
        return fmt(self.to_datetime(), locale, options)

    # ---------------------------------------------------------
    # Arithmetic
    # ---------------------------------------------------------

    def add(self, n=0, unit: str = "day") -> "DateWrapper":
        return self._new(arith.add_ms(self.epoch_ms, n, unit, self._offset))

    def subtract(self, n, unit: str = "day") -> "DateWrapper":
        return self.add(-arith.check_amount(n), unit)

    def add_days(self, n) -> "DateWrapper":
        return self.add(n, "day")

    def add_months(self, n) -> "DateWrapper":
        return self.add(n, "month")

    def add_years(self, n) -> "DateWrapper":
        return self.add(n, "year")

    def add_duration(self, duration: Duration) -> "DateWrapper":
        if not isinstance(duration, Duration):
            raise InvalidArgumentError("duration must be a Duration")
        ms = self.epoch_ms
        for n, unit in duration.steps():
            ms = arith.add_ms(ms, n, unit, self._offset)
        return self._new(ms)

    def start_of(self, unit: str = "day") -> "DateWrapper":
        return self._new(arith.start_of_ms(self.epoch_ms, unit, self._offset))

    def end_of(self, unit: str = "day") -> "DateWrapper":
        return self._new(arith.end_of_ms(self.epoch_ms, unit, self._offset))

    def iso_week(self) -> int:
        return arith.iso_week_ms(self.epoch_ms, self._offset)

    def iso_week_year(self) -> int:
        return arith.iso_week_year_ms(self.epoch_ms, self._offset)

    # ---------------------------------------------------------
    # Comparison / differences
    # ---------------------------------------------------------

    def diff(self, other: Any, unit: str = "day") -> int:
        """Whole units from `other` to self, truncated toward zero; month/year use calendar fields."""
        o = self._other_ms(other)
        if unit in _DIFF_MS:
            return _trunc_div(self.epoch_ms - o, _DIFF_MS[unit])
        if unit in ("month", "year"):
            a, b = split(self.epoch_ms, self._offset), split(o, self._offset)
            if unit == "year":
                return a.year - b.year
            return (a.year - b.year) * 12 + (a.month - b.month)
        raise InvalidArgumentError(f"Unsupported unit '{unit}'")

    def compare(self, other: Any) -> int:
        t = self._other_ms(other)
        a = self.epoch_ms
        return 0 if a == t else (-1 if a < t else 1)

    def humanize_diff(
        self,
        other: Any = None,
        *,
        locale: Optional[str] = None,
        formatter: Optional[RelativeTimeFormatter] = None,
    ) -> str:
        """
        Describe `other` relative to self in the coarsest whole unit.

        Without a formatter (argument or config) the fixed English phrases
        are used; asking for a locale in that case raises UnsupportedError.
        """
        o = self._config.now_ms() if other is None else self._other_ms(other)
        val, unit = pick_unit(self.epoch_ms - o)
        fmt = formatter or self._config.relative_formatter
        if fmt is not None:
            return fmt(-val, unit, locale)
        if locale is not None:
            raise UnsupportedError(f"Locale '{locale}' requested but no relative-time formatter is configured")
        return fallback_phrase(val, unit)

    # ---------------------------------------------------------
    # Recurrence / business days / ranges
    # ---------------------------------------------------------

    def rrule(self, rule: Union[str, RecurrenceRule]) -> Recurrence:
        return Recurrence(self._instant, rule, config=self._config)

    def _calendar(self, calendar: Optional[BusinessCalendar]) -> BusinessCalendar:
        return BusinessCalendar(config=self._config) if calendar is None else calendar

    def add_business_days(self, n, calendar: Optional[BusinessCalendar] = None) -> "DateWrapper":
        return self._new(self._calendar(calendar).add_business_days(self._instant, n).epoch_ms)

    def is_business_day(self, calendar: Optional[BusinessCalendar] = None) -> bool:
        return self._calendar(calendar).is_workday(self._instant)

    def range_to(self, other: Any) -> DateRange:
        return DateRange(self._instant, other, config=self._config)

    # ---------------------------------------------------------
    # Approximate astronomy
    # ---------------------------------------------------------

    def moon_phase(self) -> float:
        return moon_phase_fraction(self.epoch_ms, self._offset)

    def sunrise(self, latitude: float, longitude: float) -> "DateWrapper":
        return self._new(sunrise_ms(self.epoch_ms, Location(latitude, longitude), self._offset))

    def sunset(self, latitude: float, longitude: float) -> "DateWrapper":
        return self._new(sunset_ms(self.epoch_ms, Location(latitude, longitude), self._offset))

    # ---------------------------------------------------------
    # Static helpers
    # ---------------------------------------------------------

    @staticmethod
    def is_leap_year(y: int) -> bool:
        return _is_leap_year(y)

    @staticmethod
    def days_in_month(y: int, m: int) -> int:
        return _days_in_month(y, m)
