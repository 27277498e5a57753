from __future__ import annotations
from typing import Any, Iterator, List, Optional

from ..core.config import EngineConfig, resolve
from ..core.errors import InvalidArgumentError, InvalidInputError
from ..core.types import Instant
from .arithmetic import add_ms, check_unit
from .parser import normalize


class DateRange:
    """Closed interval [start, end] of instants."""

    def __init__(self, start: Any, end: Any, *, config: Optional[EngineConfig] = None):
        self.config = resolve(config)
        if isinstance(start, DateRange):
            start = start.start
        if isinstance(end, DateRange):
            end = end.end
        self.start = self._coerce(start)
        self.end = self._coerce(end)
        if self.start.epoch_ms > self.end.epoch_ms:
            raise InvalidArgumentError("Range start must be <= end")

    def _coerce(self, v: Any) -> Instant:
        inst = normalize(v, config=self.config)
        if not inst.is_valid:
            raise InvalidInputError(f"Invalid date input: {v!r}")
        return inst

    @property
    def duration_ms(self) -> int:
        return self.end.epoch_ms - self.start.epoch_ms

    def contains(self, d: Any) -> bool:
        t = self._coerce(d).epoch_ms
        return self.start.epoch_ms <= t <= self.end.epoch_ms

    __contains__ = contains

    def intersect(self, other: "DateRange") -> Optional["DateRange"]:
        """Overlap of two ranges; ranges touching at one instant meet in a zero-length range."""
        s = max(self.start.epoch_ms, other.start.epoch_ms)
        e = min(self.end.epoch_ms, other.end.epoch_ms)
        if s > e:
            return None
        return DateRange(Instant(s), Instant(e), config=self.config)

    def iter_steps(self, unit: str = "day", amount: int = 1) -> Iterator[Instant]:
        check_unit(unit)
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
            raise InvalidArgumentError(f"step amount must be an int >= 1, got {amount!r}")
        offset = self.config.utc_offset_minutes
        base, end = self.start.epoch_ms, self.end.epoch_ms
        k = 0
        cur = base
        while cur <= end:
            yield Instant(cur)
            k += 1
            cur = add_ms(base, k * amount, unit, offset)

    def to_list(self, unit: str = "day", amount: int = 1) -> List[Instant]:
        return list(self.iter_steps(unit, amount))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateRange):
            return NotImplemented
        return self.start == other.start and self.end == other.end

    def __hash__(self) -> int:
        return hash((self.start, self.end))

    def __repr__(self) -> str:
        return f"DateRange(start={self.start.epoch_ms}, end={self.end.epoch_ms})"
