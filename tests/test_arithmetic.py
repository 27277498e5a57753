# tests/test_arithmetic.py

import random

import pytest

from calwrap.core.errors import InvalidArgumentError, InvalidInputError
from calwrap.core.time import split
from calwrap.core.types import INVALID, Instant
from calwrap.engines import arithmetic as ar

from conftest import utc_ms


def test_month_addition_clamps():
    assert ar.add_ms(utc_ms(2024, 1, 31), 1, "month") == utc_ms(2024, 2, 29)
    assert ar.add_ms(utc_ms(2023, 1, 31), 1, "month") == utc_ms(2023, 2, 28)
    assert ar.add_ms(utc_ms(2024, 3, 31), -1, "month") == utc_ms(2024, 2, 29)
    assert ar.add_ms(utc_ms(2024, 10, 31), 1, "month") == utc_ms(2024, 11, 30)
    assert ar.add_ms(utc_ms(2024, 1, 31, 8, 15), 13, "month") == utc_ms(2025, 2, 28, 8, 15)


def test_year_addition_clamps_feb29():
    assert ar.add_ms(utc_ms(2024, 2, 29), 1, "year") == utc_ms(2025, 2, 28)
    assert ar.add_ms(utc_ms(2024, 2, 29), 4, "year") == utc_ms(2028, 2, 29)
    assert ar.add_ms(utc_ms(2024, 2, 29), -100, "year") == utc_ms(1924, 2, 29)


def test_fixed_units():
    base = utc_ms(2024, 3, 5, 10, 30)
    assert ar.add_ms(base, 2, "week") == utc_ms(2024, 3, 19, 10, 30)
    assert ar.add_ms(base, -36, "hour") == utc_ms(2024, 3, 3, 22, 30)
    assert ar.add_ms(base, 1.9, "day") == utc_ms(2024, 3, 6, 10, 30)
    assert ar.add_ms(base, -1.9, "day") == utc_ms(2024, 3, 4, 10, 30)


def test_month_steps_never_overflow_target_month():
    random.seed(7)
    for _ in range(2000):
        y, m, d = random.randint(1900, 2100), random.randint(1, 12), random.randint(1, 28)
        n = random.randint(-40, 40)
        start = utc_ms(y, m, d)
        f0 = split(start)
        f1 = split(ar.add_ms(start, n, "month"))
        assert (f1.year * 12 + f1.month) - (f0.year * 12 + f0.month) == n
        assert f1.day == d


def test_add_then_subtract_days_is_identity():
    random.seed(11)
    for _ in range(500):
        ms = random.randint(-10 ** 12, 10 ** 13)
        n = random.randint(-1000, 1000)
        inst = Instant(ms)
        assert ar.subtract(ar.add(inst, n, "day"), n, "day") == inst


def test_bad_arguments():
    with pytest.raises(InvalidArgumentError):
        ar.add_ms(0, 1, "fortnight")
    with pytest.raises(InvalidArgumentError):
        ar.add_ms(0, "1", "day")
    with pytest.raises(InvalidArgumentError):
        ar.add_ms(0, float("nan"), "day")
    with pytest.raises(InvalidArgumentError):
        ar.add_ms(0, True, "day")
    with pytest.raises(InvalidInputError):
        ar.add(INVALID, 1, "day")


def test_iso_week_year_boundaries():
    cases = [
        ((2021, 1, 1), (2020, 53)),
        ((2021, 1, 4), (2021, 1)),
        ((2024, 12, 30), (2025, 1)),
        ((2027, 1, 1), (2026, 53)),
        ((2026, 12, 31), (2026, 53)),
        ((2024, 3, 5), (2024, 10)),
    ]
    for ymd, (wy, wk) in cases:
        ms = utc_ms(*ymd)
        assert ar.iso_week_year_ms(ms) == wy, ymd
        assert ar.iso_week_ms(ms) == wk, ymd


def test_iso_week_stays_in_range():
    random.seed(3)
    for _ in range(2000):
        ms = utc_ms(random.randint(1950, 2150), 1, 1) + random.randint(0, 366) * 86_400_000
        assert 1 <= ar.iso_week_ms(ms) <= 53


def test_from_iso_week():
    assert ar.from_iso_week(2021, 1, 1) == Instant(utc_ms(2021, 1, 4))
    assert ar.from_iso_week(2020, 53, 5) == Instant(utc_ms(2021, 1, 1))
    assert ar.from_iso_week(2025, 1, 1) == Instant(utc_ms(2024, 12, 30))
    assert ar.from_iso_week(2024, 10, 2) == Instant(utc_ms(2024, 3, 5))


def test_from_iso_week_inverts_iso_week():
    random.seed(5)
    for _ in range(500):
        ms = utc_ms(random.randint(1990, 2060), 1, 1) + random.randint(0, 364) * 86_400_000
        wy, wk = ar.iso_week_year_ms(ms), ar.iso_week_ms(ms)
        monday = ar.from_iso_week(wy, wk, 1).epoch_ms
        assert 0 <= ms - monday < 7 * 86_400_000


def test_from_iso_week_rejects_bad_weekday():
    with pytest.raises(InvalidArgumentError):
        ar.from_iso_week(2024, 1, 0)
    with pytest.raises(InvalidArgumentError):
        ar.from_iso_week(2024, "1")


def test_boundaries():
    ms = utc_ms(2024, 3, 5, 10, 30, 15, 250)
    assert ar.start_of_ms(ms, "week") == utc_ms(2024, 3, 3)
    assert ar.end_of_ms(ms, "week") == utc_ms(2024, 3, 9, 23, 59, 59, 999)
    assert ar.start_of_ms(ms, "month") == utc_ms(2024, 3, 1)
    assert ar.end_of_ms(ms, "month") == utc_ms(2024, 3, 31, 23, 59, 59, 999)
    assert ar.start_of_ms(ms, "year") == utc_ms(2024, 1, 1)
    assert ar.end_of_ms(ms, "year") == utc_ms(2024, 12, 31, 23, 59, 59, 999)
    assert ar.start_of_ms(ms, "day") == utc_ms(2024, 3, 5)
    assert ar.start_of_ms(ms, "hour") == utc_ms(2024, 3, 5, 10)
    assert ar.end_of_ms(ms, "hour") == utc_ms(2024, 3, 5, 10, 59, 59, 999)
    assert ar.end_of_ms(utc_ms(2024, 2, 10), "month") == utc_ms(2024, 2, 29, 23, 59, 59, 999)


def test_boundaries_follow_local_offset(cfg_plus_one):
    # 23:30Z on Mar 5 is already Mar 6 at UTC+01:00
    inst = Instant(utc_ms(2024, 3, 5, 23, 30))
    assert ar.start_of(inst, "day", config=cfg_plus_one) == Instant(utc_ms(2024, 3, 5, 23))
    assert ar.weekday(inst, config=cfg_plus_one) == 3


def test_unknown_boundary_unit():
    with pytest.raises(InvalidArgumentError):
        ar.start_of_ms(0, "minute")
    with pytest.raises(InvalidArgumentError):
        ar.end_of_ms(0, "decade")


def test_month_roundtrip_only_breaks_when_clamped():
    random.seed(23)
    for _ in range(2000):
        y, m, d = random.randint(1950, 2050), random.randint(1, 12), random.randint(1, 31)
        if d > ar.days_in_month(y, m):
            continue
        n = random.randint(-30, 30)
        start = utc_ms(y, m, d, 6)
        there = ar.add_ms(start, n, "month")
        back = ar.add_ms(there, -n, "month")
        f = split(there)
        if f.day < d:
            # clamped to the last day of the shorter month
            assert f.day == ar.days_in_month(f.year, f.month)
        else:
            assert back == start
