from datetime import date, datetime, time, timezone

import pytest

from app.utils.time_helpers import (
    add_months,
    as_date,
    days_ago,
    hours_between,
    month_bounds,
    time_to_string,
)


def test_time_to_string():
    assert time_to_string(time(9, 5)) == "09:05"


def test_add_months_clamps_to_month_end():
    assert add_months(date(2030, 1, 31), 1) == date(2030, 2, 28)
    assert add_months(date(2030, 11, 15), 3) == date(2031, 2, 15)


def test_add_months_keeps_datetime_tz():
    moment = datetime(2030, 1, 31, 12, 0, tzinfo=timezone.utc)
    shifted = add_months(moment, 3)
    assert shifted == datetime(2030, 4, 30, 12, 0, tzinfo=timezone.utc)


def test_month_bounds():
    assert month_bounds(2030, 2) == (date(2030, 2, 1), date(2030, 2, 28))
    assert month_bounds(2032, 2) == (date(2032, 2, 1), date(2032, 2, 29))


def test_month_bounds_rejects_invalid_month():
    with pytest.raises(ValueError):
        month_bounds(2030, 13)


def test_hours_between():
    start = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)
    end = datetime(2030, 1, 7, 17, 30, tzinfo=timezone.utc)
    assert hours_between(start, end) == 8.5


def test_days_ago_and_as_date():
    assert days_ago(date(2030, 1, 31), 30) == date(2030, 1, 1)
    assert as_date("2030-01-07T10:00:00") == date(2030, 1, 7)
    assert as_date(datetime(2030, 1, 7, 10, 0)) == date(2030, 1, 7)
