"""
Stateless functional surface.

Each call takes caller-supplied text/values and returns a value or raises a
CalwrapError; nothing is kept between calls.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Union

from .core.config import EngineConfig
from .core.types import Instant, RecurrenceRule
from .engines import arithmetic as _arith
from .engines import recurrence as _rec
from .engines.business import DEFAULT_WORKWEEK, BusinessCalendar
from .engines.duration import Duration
from .engines.parser import normalize, parse_flexible, parse_rfc3339
from .engines.ranges import DateRange
from .wrapper import DateWrapper


def wrap(value: Any = None, *, config: Optional[EngineConfig] = None) -> DateWrapper:
    return DateWrapper(value, config=config)


def parse(text: str, *, config: Optional[EngineConfig] = None) -> Instant:
    """Flexible parse; returns INVALID rather than raising."""
    return parse_flexible(text, config=config)


def strict(text: str, *, config: Optional[EngineConfig] = None) -> Optional[Instant]:
    return parse_rfc3339(text, config=config)


def coerce(value: Any = None, *, config: Optional[EngineConfig] = None) -> Instant:
    return normalize(value, config=config)


def duration(text: str) -> Duration:
    return Duration.from_text(text)


def parse_rule(text: str) -> RecurrenceRule:
    return _rec.parse_rule(text)


def occurrences(
    start: Any,
    rule: Union[str, RecurrenceRule],
    cap: int = _rec.DEFAULT_CAP,
    *,
    config: Optional[EngineConfig] = None,
) -> List[DateWrapper]:
    w = DateWrapper(start, config=config)
    return [DateWrapper(i, config=w.config) for i in _rec.generate(w.instant, rule, cap, config=w.config)]


def business_calendar(
    holidays: Iterable[Any] = (),
    workweek: Iterable[int] = DEFAULT_WORKWEEK,
    *,
    config: Optional[EngineConfig] = None,
) -> BusinessCalendar:
    return BusinessCalendar(holidays, workweek, config=config)


def date_range(start: Any, end: Any, *, config: Optional[EngineConfig] = None) -> DateRange:
    return DateRange(start, end, config=config)


def from_iso_week(year: int, week: int, weekday: int = 1, *, config: Optional[EngineConfig] = None) -> DateWrapper:
    return DateWrapper.from_iso_week(year, week, weekday, config=config)


def is_leap_year(y: int) -> bool:
    return DateWrapper.is_leap_year(y)


def days_in_month(y: int, m: int) -> int:
    return DateWrapper.days_in_month(y, m)


units = _arith.UNITS
