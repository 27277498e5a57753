from __future__ import annotations

import argparse
import importlib
import inspect
import logging
import sys

from calwrap.core.config import EngineConfig
from calwrap.core.errors import CalwrapError


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _wrap(text: str, cfg: EngineConfig):
    from calwrap.wrapper import DateWrapper
    return DateWrapper(text, config=cfg)


def cmd_parse(argv: list[str], cfg: EngineConfig) -> int:
    p = argparse.ArgumentParser(prog="calwrap parse", description="Parse flexible date text")
    p.add_argument("text", nargs="+")
    p.add_argument("--format", default=None, help="format pattern (default: RFC 3339 UTC)")
    args = p.parse_args(argv)

    w = _wrap(" ".join(args.text), cfg)
    print(w.format(args.format) if args.format else w.to_rfc3339())
    return 0


def cmd_add(argv: list[str], cfg: EngineConfig) -> int:
    p = argparse.ArgumentParser(prog="calwrap add", description="Calendar-aware addition")
    p.add_argument("date")
    p.add_argument("amount", type=int)
    p.add_argument("unit")
    args = p.parse_args(argv)

    print(_wrap(args.date, cfg).add(args.amount, args.unit).to_rfc3339())
    return 0


def cmd_isoweek(argv: list[str], cfg: EngineConfig) -> int:
    p = argparse.ArgumentParser(prog="calwrap isoweek", description="ISO week-year and week number")
    p.add_argument("date")
    args = p.parse_args(argv)

    w = _wrap(args.date, cfg)
    print(f"{w.iso_week_year()}-W{w.iso_week():02d}")
    return 0


def cmd_rrule(argv: list[str], cfg: EngineConfig) -> int:
    p = argparse.ArgumentParser(prog="calwrap rrule", description="Expand a recurrence rule")
    p.add_argument("start")
    p.add_argument("rule", help="e.g. FREQ=WEEKLY;BYDAY=MO,WE;COUNT=6")
    p.add_argument("--cap", type=int, default=100)
    p.add_argument("--format", default=None)
    args = p.parse_args(argv)

    from calwrap.wrapper import DateWrapper
    for inst in _wrap(args.start, cfg).rrule(args.rule).all(cap=args.cap):
        w = DateWrapper(inst, config=cfg)
        print(w.format(args.format) if args.format else w.to_rfc3339())
    return 0


def cmd_bizdays(argv: list[str], cfg: EngineConfig) -> int:
    from calwrap.engines.business import BusinessCalendar

    p = argparse.ArgumentParser(prog="calwrap bizdays", description="Add business days")
    p.add_argument("date")
    p.add_argument("n", type=float)
    p.add_argument("--holiday", action="append", default=[], help="holiday date (repeatable)")
    p.add_argument("--workweek", default="1,2,3,4,5", help="weekday indices, 0=Sunday")
    args = p.parse_args(argv)

    workweek = [int(x) for x in args.workweek.split(",") if x.strip()]
    cal = BusinessCalendar(args.holiday, workweek, config=cfg)
    print(_wrap(args.date, cfg).add_business_days(args.n, cal).format("YYYY-MM-DD dddd"))
    return 0


def cmd_duration(argv: list[str], cfg: EngineConfig) -> int:
    from calwrap.engines.duration import Duration

    p = argparse.ArgumentParser(prog="calwrap duration", description="Parse a PnYnMnDTnHnMnS duration")
    p.add_argument("text")
    p.add_argument("--from", dest="start", default=None, help="apply the duration to this date")
    args = p.parse_args(argv)

    d = Duration.from_text(args.text)
    print(d)
    if args.start:
        print(_wrap(args.start, cfg).add_duration(d).to_rfc3339())
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="calwrap", description="Calendar engine CLI.")
    p.add_argument("--offset", default="Z", help="local UTC offset, e.g. +05:30 (default: Z)")
    p.add_argument("--log-level", default="WARNING")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("parse", help="Parse flexible date text")
    sub.add_parser("add", help="Calendar-aware addition")
    sub.add_parser("isoweek", help="ISO week of a date")
    sub.add_parser("rrule", help="Expand a recurrence rule")
    sub.add_parser("bizdays", help="Add business days")
    sub.add_parser("duration", help="Parse a duration")

    # diagnostics
    sub.add_parser("month", help="Print a month grid (diagnostics)")
    sub.add_parser("moon-scatter", help="Plot the approximate moon phase (needs diagnostics extras)")

    args, rest = p.parse_known_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    commands = {
        "parse": cmd_parse,
        "add": cmd_add,
        "isoweek": cmd_isoweek,
        "rrule": cmd_rrule,
        "bizdays": cmd_bizdays,
        "duration": cmd_duration,
    }
    try:
        cfg = EngineConfig.with_offset(args.offset)
        if args.cmd == "month":
            return _run_module_main("calwrap.diagnostics.pretty_month", rest + [f"--offset={args.offset}"])
        if args.cmd == "moon-scatter":
            return _run_module_main("calwrap.diagnostics.moon_scatter", rest)
        return commands[args.cmd](rest, cfg)
    except CalwrapError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
