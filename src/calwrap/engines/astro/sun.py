"""
calwrap.engines.astro.sun
-------------------------
Crude latitude-only sunrise/sunset.

The half-day length is round(6 - |latitude| / 15) hours, applied symmetrically
around local noon of the instant's local date. Longitude is accepted and
validated but not used. This is a reproducible approximation, not an
astronomical model.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real

from ...core.errors import InvalidArgumentError
from ...core.time import MS_PER_HOUR, join, split


@dataclass(frozen=True)
class Location:
    lat_deg: float
    lon_deg: float  # positive East; reserved

    def __post_init__(self) -> None:
        for name, v in (("latitude", self.lat_deg), ("longitude", self.lon_deg)):
            if isinstance(v, bool) or not isinstance(v, Real) or not math.isfinite(v):
                raise InvalidArgumentError(f"{name} must be a finite real number, got {v!r}")


def half_day_hours(lat_deg: float) -> int:
    # halves round up
    return math.floor(6 - abs(lat_deg) / 15 + 0.5)


def _local_noon(epoch_ms: int, offset_minutes: int) -> int:
    f = split(epoch_ms, offset_minutes)
    return join(f.year, f.month, f.day, 12, offset_minutes=offset_minutes)


def sunrise_ms(epoch_ms: int, loc: Location, offset_minutes: int = 0) -> int:
    return _local_noon(epoch_ms, offset_minutes) - half_day_hours(loc.lat_deg) * MS_PER_HOUR


def sunset_ms(epoch_ms: int, loc: Location, offset_minutes: int = 0) -> int:
    return _local_noon(epoch_ms, offset_minutes) + half_day_hours(loc.lat_deg) * MS_PER_HOUR
