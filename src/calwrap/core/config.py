from __future__ import annotations
import re
import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Protocol

from .errors import FormatError, InvalidArgumentError

_OFFSET_RE = re.compile(r"^([+\-])(\d{2}):?(\d{2})$", re.ASCII)


class RelativeTimeFormatter(Protocol):
    """
    Locale-aware relative phrase for a signed amount of one unit.

    `value` follows the usual convention: negative is in the past
    (-3, "day") -> "3 days ago".
    """
    def __call__(self, value: int, unit: str, locale: Optional[str]) -> str: ...


class DateTimeFormatter(Protocol):
    """
    Locale-aware rendering of an aware datetime.

    `options` are passed through untouched (e.g. dateStyle="full").
    """
    def __call__(self, value: datetime, locale: Optional[str], options: Mapping[str, Any]) -> str: ...


def system_clock_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class EngineConfig:
    utc_offset_minutes: int = 0
    clock: Callable[[], int] = field(default=system_clock_ms, compare=False)
    relative_formatter: Optional[RelativeTimeFormatter] = field(default=None, compare=False)
    datetime_formatter: Optional[DateTimeFormatter] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        off = self.utc_offset_minutes
        if isinstance(off, bool) or not isinstance(off, int) or not -1439 <= off <= 1439:
            raise InvalidArgumentError(f"utc_offset_minutes must be an int in [-1439, 1439], got {off!r}")

    def tweak(self, **kwargs) -> "EngineConfig":
        return replace(self, **kwargs)

    def now_ms(self) -> int:
        return int(self.clock())

    @classmethod
    def with_offset(cls, text: str, **kwargs) -> "EngineConfig":
        """Build a config from offset text such as 'Z', '+05:30' or '-0800'."""
        s = text.strip()
        if s in ("Z", "z", "UTC"):
            return cls(utc_offset_minutes=0, **kwargs)
        m = _OFFSET_RE.match(s)
        if not m:
            raise FormatError(f"Invalid UTC offset '{text}'")
        sign = 1 if m.group(1) == "+" else -1
        hours, minutes = int(m.group(2)), int(m.group(3))
        if hours > 23 or minutes > 59:
            raise FormatError(f"Invalid UTC offset '{text}'")
        return cls(utc_offset_minutes=sign * (hours * 60 + minutes), **kwargs)


DEFAULT_CONFIG = EngineConfig()


def resolve(config: Optional[EngineConfig]) -> EngineConfig:
    return DEFAULT_CONFIG if config is None else config
