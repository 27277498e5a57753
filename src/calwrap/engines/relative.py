from __future__ import annotations
import math
from datetime import timedelta
from typing import Optional, Tuple

from ..core.config import RelativeTimeFormatter
from ..core.errors import UnsupportedError
from ..core.time import MS_PER_DAY, MS_PER_HOUR, MS_PER_MINUTE, MS_PER_SECOND

# Coarsest first; seconds is the floor.
HUMANIZE_UNITS: Tuple[Tuple[str, int], ...] = (
    ("year", 365 * MS_PER_DAY),
    ("month", 30 * MS_PER_DAY),
    ("day", MS_PER_DAY),
    ("hour", MS_PER_HOUR),
    ("minute", MS_PER_MINUTE),
    ("second", MS_PER_SECOND),
)


def pick_unit(diff_ms: int) -> Tuple[int, str]:
    """(rounded value, unit) for the coarsest unit with magnitude >= 1."""
    mag = abs(diff_ms)
    for name, size in HUMANIZE_UNITS:
        if mag >= size or name == "second":
            return math.floor(diff_ms / size + 0.5), name
    raise AssertionError("unreachable")


def fallback_phrase(val: int, unit: str) -> str:
    """Fixed English phrase; positive `val` means the other instant lies in the past."""
    if val == 0:
        return "now"
    n = abs(val)
    label = unit + ("s" if n > 1 else "")
    return f"{n} {label} ago" if val > 0 else f"in {n} {label}"


def _need_humanize():
    try:
        import humanize
        return humanize
    except ImportError as e:
        raise UnsupportedError('Need humanize. Install: pip install "calwrap[i18n]"') from e


def humanize_formatter(locale: Optional[str] = None) -> RelativeTimeFormatter:
    """
    RelativeTimeFormatter backed by the `humanize` package.

    The locale is activated on every call so formatters for different
    locales can coexist.
    """
    humanize = _need_humanize()
    sizes = dict(HUMANIZE_UNITS)

    def _format(value: int, unit: str, loc: Optional[str] = None) -> str:
        use = loc or locale
        if use:
            try:
                humanize.i18n.activate(use)
            except FileNotFoundError as e:
                raise UnsupportedError(f"No humanize translation for locale '{use}'") from e
        try:
            # naturaltime reads a positive delta as "ago"
            return humanize.naturaltime(timedelta(milliseconds=-value * sizes[unit]))
        finally:
            if use:
                humanize.i18n.deactivate()

    return _format
