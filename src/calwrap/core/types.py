from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple

from .errors import FormatError, InvalidInputError


@dataclass(frozen=True)
class Instant:
    """A point in time as UTC epoch milliseconds. `epoch_ms=None` is the invalid sentinel."""
    epoch_ms: Optional[int]

    @property
    def is_valid(self) -> bool:
        return self.epoch_ms is not None

    def require(self) -> int:
        """Epoch milliseconds, or InvalidInputError for the sentinel."""
        if self.epoch_ms is None:
            raise InvalidInputError("invalid instant")
        return self.epoch_ms

    def __lt__(self, other: "Instant") -> bool:
        return self.require() < other.require()

    def __le__(self, other: "Instant") -> bool:
        return self.require() <= other.require()

    def __gt__(self, other: "Instant") -> bool:
        return self.require() > other.require()

    def __ge__(self, other: "Instant") -> bool:
        return self.require() >= other.require()


INVALID = Instant(None)


class Frequency(Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


# Two-letter codes -> 0=Sunday..6=Saturday
WEEKDAY_CODES = {"SU": 0, "MO": 1, "TU": 2, "WE": 3, "TH": 4, "FR": 5, "SA": 6}


@dataclass(frozen=True)
class RecurrenceRule:
    freq: Frequency = Frequency.DAILY
    interval: int = 1
    count: Optional[int] = None
    by_weekday: Tuple[str, ...] = ()
    by_month_day: Tuple[int, ...] = ()
    extras: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.interval < 1:
            object.__setattr__(self, "interval", 1)
        if self.count is not None and self.count < 0:
            raise FormatError(f"COUNT must be non-negative, got {self.count}")
        for code in self.by_weekday:
            if code not in WEEKDAY_CODES:
                raise FormatError(f"Unknown BYDAY code '{code}'. Available: {sorted(WEEKDAY_CODES)}")
        for md in self.by_month_day:
            if not 1 <= md <= 31:
                raise FormatError(f"BYMONTHDAY must be within 1..31, got {md}")
