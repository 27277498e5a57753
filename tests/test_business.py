# tests/test_business.py

import pytest

from calwrap.core.errors import InvalidArgumentError, InvalidInputError
from calwrap.core.types import Instant
from calwrap.engines.business import BusinessCalendar

from conftest import utc_ms

FRI = Instant(utc_ms(2024, 3, 8, 15))


def test_friday_plus_one_is_monday():
    cal = BusinessCalendar()
    assert cal.add_business_days(FRI, 1) == Instant(utc_ms(2024, 3, 11, 15))


def test_holiday_is_skipped():
    cal = BusinessCalendar(["2024-03-11"])
    assert cal.add_business_days(FRI, 1) == Instant(utc_ms(2024, 3, 12, 15))
    assert cal.is_holiday("2024-03-11T18:00:00Z")
    assert not cal.is_workday("2024-03-11")


def test_backwards_and_zero():
    cal = BusinessCalendar()
    mon = Instant(utc_ms(2024, 3, 11))
    assert cal.add_business_days(mon, -1) == Instant(utc_ms(2024, 3, 8))
    assert cal.add_business_days(mon, 0) == mon
    # zero steps from a weekend stays on the weekend
    sat = Instant(utc_ms(2024, 3, 9))
    assert cal.add_business_days(sat, 0) == sat


def test_fractional_n_floors():
    cal = BusinessCalendar()
    mon = Instant(utc_ms(2024, 3, 11))
    assert cal.add_business_days(mon, 2.7) == Instant(utc_ms(2024, 3, 13))
    assert cal.add_business_days(mon, -0.5) == Instant(utc_ms(2024, 3, 8))


def test_custom_workweek():
    # Sunday..Thursday
    cal = BusinessCalendar(workweek=[0, 1, 2, 3, 4])
    thu = Instant(utc_ms(2024, 3, 7))
    assert cal.add_business_days(thu, 1) == Instant(utc_ms(2024, 3, 10))
    assert cal.is_workday("2024-03-10")
    assert not cal.is_workday("2024-03-08")


def test_holidays_compare_by_local_day(cfg_plus_one):
    # 23:30Z on Mar 10 is Mar 11 at UTC+01:00
    cal = BusinessCalendar(["2024-03-11T00:15:00+01:00"], config=cfg_plus_one)
    assert cal.is_holiday(Instant(utc_ms(2024, 3, 10, 23, 30)))
    assert not cal.is_holiday(Instant(utc_ms(2024, 3, 10, 22, 30)))


def test_result_is_a_workday():
    cal = BusinessCalendar(["2024-12-25", "2024-12-26", "2025-01-01"])
    start = Instant(utc_ms(2024, 12, 20))
    for n in range(-15, 16):
        if n == 0:
            continue
        assert cal.is_workday(cal.add_business_days(start, n))


def test_validation():
    with pytest.raises(InvalidArgumentError):
        BusinessCalendar(workweek=[])
    with pytest.raises(InvalidArgumentError):
        BusinessCalendar(workweek=[7])
    with pytest.raises(InvalidInputError):
        BusinessCalendar(["not a day"])
    cal = BusinessCalendar()
    with pytest.raises(InvalidArgumentError):
        cal.add_business_days(FRI, float("inf"))
    with pytest.raises(InvalidArgumentError):
        cal.add_business_days(FRI, "2")
    with pytest.raises(InvalidInputError):
        cal.is_workday("nonsense")


def test_zero_business_days_is_identity():
    cal = BusinessCalendar(["2024-03-09"])
    for h in range(0, 24 * 10, 7):
        d = Instant(utc_ms(2024, 3, 4) + h * 3_600_000)
        assert cal.add_business_days(d, 0) == d
