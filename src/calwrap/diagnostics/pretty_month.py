from __future__ import annotations

import argparse
from typing import List, Optional, Tuple

from calwrap.core.config import EngineConfig, resolve
from calwrap.core.time import MONTH_NAMES_LONG, days_in_month, join
from calwrap.core.types import Instant
from calwrap.engines.business import BusinessCalendar
from calwrap.wrapper import DateWrapper


def dow_header() -> str:
    return "Wk   Su     Mo     Tu     We     Th     Fr     Sa"


def cell(top: str, bot: str, w: int = 6) -> Tuple[str, str]:
    return (top[:w].ljust(w), bot[:w].ljust(w))


def day_label(w: DateWrapper, cal: BusinessCalendar) -> str:
    if cal.is_holiday(w.instant):
        return "hol"
    if not cal.is_workday(w.instant):
        return "-"
    return f"m{round(w.moon_phase() * 100):02d}"


def render_month(
    year: int,
    month: int,
    *,
    calendar: Optional[BusinessCalendar] = None,
    config: Optional[EngineConfig] = None,
) -> str:
    """
    Sunday-first month grid. The left column is the ISO week of the row's
    Monday; the lower line of each cell marks holidays ('hol'), non-workdays
    ('-') or the approximate moon phase in percent.
    """
    cfg = resolve(config)
    cal = calendar if calendar is not None else BusinessCalendar(config=cfg)
    first = DateWrapper(Instant(join(year, month, 1, offset_minutes=cfg.utc_offset_minutes)), config=cfg)
    pad = first.diff(first.start_of("week"), "day")  # Sunday=0

    weeks: List[List[Tuple[str, str]]] = []
    wk: List[Tuple[str, str]] = [cell("", "") for _ in range(pad)]
    for i in range(days_in_month(year, month)):
        d = first.add(i, "day")
        wk.append(cell(f"{i + 1:2d}", day_label(d, cal)))
        if len(wk) == 7:
            weeks.append(wk)
            wk = []
    if wk:
        while len(wk) < 7:
            wk.append(cell("", ""))
        weeks.append(wk)

    lines = [f"{MONTH_NAMES_LONG[month - 1]} {year}", dow_header(), "-" * len(dow_header())]
    row_start = first.start_of("week")
    for row in weeks:
        iso = row_start.add(1, "day").iso_week()
        lines.append(f"{iso:2d}   " + " ".join(c[0] for c in row))
        lines.append("     " + " ".join(c[1] for c in row))
        row_start = row_start.add(1, "week")
    return "\n".join(lines) + "\n"


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Print a Gregorian month grid with ISO weeks, workdays and moon phase.")
    p.add_argument("year", type=int)
    p.add_argument("month", type=int)
    p.add_argument("--holiday", action="append", default=[], help="holiday date (repeatable)")
    p.add_argument("--offset", default="Z", help="local UTC offset, e.g. +05:30 (default: Z)")
    args = p.parse_args(argv)

    cfg = EngineConfig.with_offset(args.offset)
    cal = BusinessCalendar(args.holiday, config=cfg)
    print(render_month(args.year, args.month, calendar=cal, config=cfg))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
