from __future__ import annotations
import math
from numbers import Real
from typing import Any, FrozenSet, Iterable, Optional

from ..core.config import EngineConfig, resolve
from ..core.errors import InvalidArgumentError, InvalidInputError
from ..core.time import MS_PER_DAY, local_midnight, split
from ..core.types import Instant
from .parser import normalize

DEFAULT_WORKWEEK = (1, 2, 3, 4, 5)


class BusinessCalendar:
    """
    Holidays plus a workweek (0=Sunday..6=Saturday).

    Holidays are compared by local calendar day: the set is normalized to
    local midnight once, at construction.
    """

    def __init__(
        self,
        holidays: Iterable[Any] = (),
        workweek: Iterable[int] = DEFAULT_WORKWEEK,
        *,
        config: Optional[EngineConfig] = None,
    ):
        self.config = resolve(config)
        offset = self.config.utc_offset_minutes

        days = set()
        for h in holidays:
            inst = normalize(h, config=self.config)
            if not inst.is_valid:
                raise InvalidInputError(f"Invalid holiday: {h!r}")
            days.add(local_midnight(inst.epoch_ms, offset))
        self.holidays: FrozenSet[int] = frozenset(days)

        ww = frozenset(workweek)
        if not ww:
            raise InvalidArgumentError("workweek must contain at least one weekday")
        for d in ww:
            if isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 6:
                raise InvalidArgumentError(f"workweek days must be ints within 0..6, got {d!r}")
        self.workweek: FrozenSet[int] = ww

    def _ms(self, d: Any) -> int:
        inst = normalize(d, config=self.config)
        if not inst.is_valid:
            raise InvalidInputError(f"Invalid date input: {d!r}")
        return inst.epoch_ms

    def _is_holiday_ms(self, ms: int) -> bool:
        return local_midnight(ms, self.config.utc_offset_minutes) in self.holidays

    def _is_workday_ms(self, ms: int) -> bool:
        wd = split(ms, self.config.utc_offset_minutes).weekday
        return wd in self.workweek and not self._is_holiday_ms(ms)

    def is_holiday(self, d: Any) -> bool:
        return self._is_holiday_ms(self._ms(d))

    def is_workday(self, d: Any) -> bool:
        return self._is_workday_ms(self._ms(d))

    def add_business_days(self, d: Any, n) -> Instant:
        """Walk one day at a time in the direction of n, counting only workdays."""
        if isinstance(n, bool) or not isinstance(n, Real) or not math.isfinite(n):
            raise InvalidArgumentError(f"n must be a finite number, got {n!r}")
        cur = self._ms(d)
        step = MS_PER_DAY if n >= 0 else -MS_PER_DAY
        remaining = abs(math.floor(n))
        while remaining > 0:
            cur += step
            if self._is_workday_ms(cur):
                remaining -= 1
        return Instant(cur)

    def __repr__(self) -> str:
        return f"BusinessCalendar(holidays={len(self.holidays)}, workweek={sorted(self.workweek)})"
