from __future__ import annotations
import re
from dataclasses import dataclass

from ..core.errors import FormatError

_DURATION_RE = re.compile(
    r"^P(?:(\d+)Y)?(?:(\d+)M)?(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?\Z",
    re.ASCII,
)


@dataclass(frozen=True)
class Duration:
    """Calendar-aware span. Components are applied additively, largest unit first."""
    years: int = 0
    months: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0

    @classmethod
    def from_text(cls, text: str) -> "Duration":
        """Parse `PnYnMnDTnHnMnS`. A bare 'P' is the zero duration."""
        m = _DURATION_RE.match(text)
        if not m:
            raise FormatError(f"Invalid duration '{text}'")
        y, mo, d, h, mi, s = (int(g) if g else 0 for g in m.groups())
        return cls(years=y, months=mo, days=d, hours=h, minutes=mi, seconds=s)

    def to_text(self) -> str:
        """Non-zero components only; milliseconds are not represented."""
        out = "P"
        if self.years:
            out += f"{self.years}Y"
        if self.months:
            out += f"{self.months}M"
        if self.days:
            out += f"{self.days}D"
        if self.hours or self.minutes or self.seconds:
            out += "T"
        if self.hours:
            out += f"{self.hours}H"
        if self.minutes:
            out += f"{self.minutes}M"
        if self.seconds:
            out += f"{self.seconds}S"
        return out

    def is_zero(self) -> bool:
        return not any((self.years, self.months, self.days, self.hours,
                        self.minutes, self.seconds, self.milliseconds))

    def steps(self):
        """(amount, unit) pairs in application order, zero components skipped."""
        pairs = (
            (self.years, "year"),
            (self.months, "month"),
            (self.days, "day"),
            (self.hours, "hour"),
            (self.minutes, "minute"),
            (self.seconds, "second"),
            (self.milliseconds, "millisecond"),
        )
        return [(n, u) for n, u in pairs if n]

    def __str__(self) -> str:
        return self.to_text()
