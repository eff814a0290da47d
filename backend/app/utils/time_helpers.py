import calendar
from datetime import date, datetime, time, timedelta
from typing import Tuple, TypeVar, Union

D = TypeVar("D", date, datetime)


def time_to_string(t: time) -> str:
    """Always return HH:MM format"""
    return t.strftime("%H:%M")


def add_months(value: D, months: int) -> D:
    """Shift a date/datetime by whole months, clamping to the month's last day."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of a month."""
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def hours_between(start: datetime, end: datetime) -> float:
    return round((end - start).total_seconds() / 3600, 2)


def days_ago(today: date, days: int) -> date:
    return today - timedelta(days=days)


def as_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])
