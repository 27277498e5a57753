"""calwrap public API.

Keep this surface small: users should mostly interact with DateWrapper and
the functions re-exported here.
"""

from .api import (
    wrap,
    parse,
    strict,
    coerce,
    duration,
    parse_rule,
    occurrences,
    business_calendar,
    date_range,
    from_iso_week,
    is_leap_year,
    days_in_month,
    units,
)
from .core.config import DEFAULT_CONFIG, EngineConfig
from .core.errors import (
    CalwrapError,
    FormatError,
    InvalidArgumentError,
    InvalidInputError,
    UnsupportedError,
)
from .core.types import INVALID, Frequency, Instant, RecurrenceRule
from .engines.business import BusinessCalendar
from .engines.duration import Duration
from .engines.ranges import DateRange
from .engines.recurrence import Recurrence
from .wrapper import DateWrapper

__all__ = [
    "wrap",
    "parse",
    "strict",
    "coerce",
    "duration",
    "parse_rule",
    "occurrences",
    "business_calendar",
    "date_range",
    "from_iso_week",
    "is_leap_year",
    "days_in_month",
    "units",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "CalwrapError",
    "FormatError",
    "InvalidArgumentError",
    "InvalidInputError",
    "UnsupportedError",
    "INVALID",
    "Frequency",
    "Instant",
    "RecurrenceRule",
    "BusinessCalendar",
    "Duration",
    "DateRange",
    "Recurrence",
    "DateWrapper",
]
