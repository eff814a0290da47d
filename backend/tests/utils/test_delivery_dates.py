from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from app.utils.delivery_dates import (
    days_until,
    is_critically_urgent,
    ready_expiration,
    ready_status,
    scheduled_status,
)

TODAY = date(2030, 2, 20)


def test_days_until_accepts_dates_and_strings():
    assert days_until(date(2030, 2, 23), TODAY) == 3
    assert days_until("2030-02-18", TODAY) == -2


def test_days_until_uses_studio_date_for_datetimes():
    # 03:00 UTC is still the previous evening in Guayaquil
    assert days_until(datetime(2030, 2, 21, 3, 0, tzinfo=timezone.utc), TODAY) == 0


def test_ready_expiration_adds_retention_window():
    ready_at = datetime(2030, 1, 1, 17, 0, tzinfo=timezone.utc)
    assert ready_expiration(ready_at) == datetime(2030, 3, 2, 17, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "days, expected",
    [(5, "upcoming"), (1, "tomorrow"), (0, "today"), (-3, "overdue")],
)
def test_scheduled_status(days, expected):
    assert scheduled_status(days) == expected


@pytest.mark.parametrize(
    "days, expected",
    [(0, "expired"), (-1, "expired"), (10, "warning"), (30, "warning"), (31, "ok")],
)
def test_ready_status(days, expected):
    assert ready_status(days) == expected


def test_pending_past_schedule_is_critical():
    delivery = SimpleNamespace(status="pending", scheduled_date=date(2030, 2, 19), ready_at=None)
    assert is_critically_urgent(delivery, TODAY) is True


def test_pending_future_schedule_is_not_critical():
    delivery = SimpleNamespace(status="pending", scheduled_date=date(2030, 2, 25), ready_at=None)
    assert is_critically_urgent(delivery, TODAY) is False


def test_ready_piece_close_to_expiry_is_critical():
    delivery = SimpleNamespace(
        status="ready",
        scheduled_date=date(2030, 1, 1),
        ready_at=datetime(2030, 1, 1, 17, 0, tzinfo=timezone.utc),
    )
    assert is_critically_urgent(delivery, TODAY) is True


def test_ready_piece_already_expired_is_not_critical():
    delivery = SimpleNamespace(
        status="ready",
        scheduled_date=date(2029, 11, 1),
        ready_at=datetime(2029, 11, 1, 17, 0, tzinfo=timezone.utc),
    )
    assert is_critically_urgent(delivery, TODAY) is False
