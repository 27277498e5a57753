"""
calwrap.engines.recurrence
--------------------------
Subset of RFC 5545 RRULE: FREQ, INTERVAL, COUNT, BYDAY, BYMONTHDAY.

Expansion is delegated to dateutil.rrule. The rule is rewritten so that a
clamped month (Jan 31 -> Feb 29) does not drift the following occurrences,
and so that BYDAY / BYMONTHDAY sets start in the period after the start
instant. The start itself is never emitted.
"""

from __future__ import annotations

import itertools
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Iterator, List, Optional, Union

from dateutil import rrule as du_rrule
from dateutil.relativedelta import relativedelta

from ..core.config import EngineConfig, resolve
from ..core.errors import FormatError, InvalidInputError
from ..core.time import join, split
from ..core.types import Frequency, Instant, RecurrenceRule

logger = logging.getLogger(__name__)

DEFAULT_CAP = 1000

_FREQ = {
    Frequency.DAILY: du_rrule.DAILY,
    Frequency.WEEKLY: du_rrule.WEEKLY,
    Frequency.MONTHLY: du_rrule.MONTHLY,
    Frequency.YEARLY: du_rrule.YEARLY,
}


def _int(key: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise FormatError(f"{key} must be an integer, got '{raw}'") from None


def parse_rule(text: str) -> RecurrenceRule:
    parts = [p.strip() for p in text.split(";")]
    kw: Dict[str, object] = {}
    extras: Dict[str, str] = {}
    for p in parts:
        if not p:
            continue
        k, sep, v = p.partition("=")
        if not k:
            continue
        key = k.strip().upper()
        if key in ("FREQ", "INTERVAL", "COUNT", "BYDAY", "BYMONTHDAY") and not sep:
            raise FormatError(f"{key} requires a value")

        if key == "FREQ":
            try:
                kw["freq"] = Frequency(v.strip().upper())
            except ValueError:
                raise FormatError(f"Unknown FREQ '{v}'. Available: {[f.value for f in Frequency]}") from None
        elif key == "INTERVAL":
            try:
                kw["interval"] = max(1, int(v.strip()))
            except ValueError:
                kw["interval"] = 1
        elif key == "COUNT":
            kw["count"] = _int(key, v)
        elif key == "BYDAY":
            codes: List[str] = []
            for x in v.split(","):
                code = x.strip().upper()
                if code and code not in codes:
                    codes.append(code)
            kw["by_weekday"] = tuple(codes)
        elif key == "BYMONTHDAY":
            days: List[int] = []
            for x in v.split(","):
                if x.strip():
                    md = _int(key, x)
                    if md not in days:
                        days.append(md)
            kw["by_month_day"] = tuple(days)
        else:
            extras[key.lower()] = v
    return RecurrenceRule(extras=extras, **kw)


def _clamped_day(day: int) -> Dict[str, Any]:
    # last existing day among day, day-1, ... 28
    if day <= 28:
        return {"bymonthday": day}
    return {"bymonthday": tuple(range(28, day + 1)), "bysetpos": -1}


def _build_rrule(start: datetime, rule: RecurrenceRule) -> du_rrule.rrule:
    kw: Dict[str, Any] = {"freq": _FREQ[rule.freq], "interval": rule.interval, "dtstart": start}
    if rule.freq is Frequency.WEEKLY and rule.by_weekday:
        sunday = start - timedelta(days=(start.weekday() + 1) % 7)
        kw["dtstart"] = sunday + timedelta(weeks=rule.interval)
        kw["byweekday"] = tuple(getattr(du_rrule, code) for code in rule.by_weekday)
        kw["wkst"] = du_rrule.SU
    elif rule.freq is Frequency.MONTHLY and rule.by_month_day:
        kw["dtstart"] = start.replace(day=1) + relativedelta(months=rule.interval)
        kw["bymonthday"] = rule.by_month_day
    elif rule.freq is Frequency.MONTHLY:
        kw.update(_clamped_day(start.day))
    elif rule.freq is Frequency.YEARLY:
        kw["bymonth"] = start.month
        kw.update(_clamped_day(start.day))
    return du_rrule.rrule(**kw)


def generate(
    start: Instant,
    rule: Union[str, RecurrenceRule],
    cap: int = DEFAULT_CAP,
    *,
    config: Optional[EngineConfig] = None,
) -> Iterator[Instant]:
    """
    Lazily yield occurrences after `start`.

    Stops after `rule.count` or `cap` occurrences, whichever comes first.
    Each call returns a fresh, single-use generator.
    """
    if isinstance(rule, str):
        rule = parse_rule(rule)
    cfg = resolve(config)
    offset = cfg.utc_offset_minutes
    f = split(start.require(), offset)
    if not 1 <= f.year <= 9999:
        raise InvalidInputError(f"Recurrence start year {f.year} is outside 1..9999")
    local = datetime(f.year, f.month, f.day, f.hour, f.minute, f.second)

    limit = cap if rule.count is None else min(rule.count, cap)
    try:
        expansion = _build_rrule(local, rule)
    except (ValueError, OverflowError):
        # the first period already lies past year 9999
        return

    later = (dt for dt in expansion if dt > local)
    for dt in itertools.islice(later, limit):
        yield Instant(join(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second, f.millisecond, offset))

    if rule.count is None or rule.count > cap:
        logger.debug("recurrence expansion stopped at cap=%d", cap)


class Recurrence:
    """Re-iterable view of a rule anchored at a start instant."""

    def __init__(self, start: Instant, rule: Union[str, RecurrenceRule], *, config: Optional[EngineConfig] = None):
        self.start = start
        self.rule = parse_rule(rule) if isinstance(rule, str) else rule
        self.config = resolve(config)

    def all(self, cap: int = 100) -> List[Instant]:
        return list(generate(self.start, self.rule, cap, config=self.config))

    def next(self, n: int = 1) -> List[Instant]:
        return list(generate(self.start, self.rule, n, config=self.config))

    def __iter__(self) -> Iterator[Instant]:
        return generate(self.start, self.rule, config=self.config)

    def __repr__(self) -> str:
        return f"Recurrence(start={self.start!r}, rule={self.rule!r})"
