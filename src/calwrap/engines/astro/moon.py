"""
calwrap.engines.astro.moon
--------------------------
Closed-form moon phase from the calendar date alone.

A golden-number style residual of the year is folded together with month and
day into a position on a 30-step cycle; the distance from the midpoint gives
a fraction in [0, 1]. Integer arithmetic only, no ephemeris.
"""

from __future__ import annotations

import math

from ...core.time import split


def _trunc_rem(a: int, b: int) -> int:
    """Remainder with the sign of the dividend (truncated division)."""
    return int(math.fmod(a, b))


def moon_phase_fraction_ymd(year: int, month: int, day: int) -> float:
    r = _trunc_rem(year, 100)
    r = _trunc_rem(r, 19)
    if r > 9:
        r -= 19
    t = _trunc_rem(r * 11, 30) + month + day
    if month < 3:
        t += 2
    t %= 30
    return abs((t - 15) / 15)


def moon_phase_fraction(epoch_ms: int, offset_minutes: int = 0) -> float:
    f = split(epoch_ms, offset_minutes)
    return moon_phase_fraction_ymd(f.year, f.month, f.day)
