"""Tests for the periodic maintenance tasks and the beat schedule."""

from contextlib import contextmanager
from datetime import timedelta

from celery.schedules import crontab
import pytest

from app.core.timezone_utils import utc_now
from app.services.booking_service import BookingService
from app.services.delivery_service import DeliveryService
from app.services.giftcard_service import GiftcardService
from app.tasks import maintenance
from app.tasks.beat_schedule import CELERYBEAT_SCHEDULE, get_beat_schedule


@pytest.fixture
def task_db(db, monkeypatch):
    """Point the tasks' session factory at the test session."""

    @contextmanager
    def _session():
        yield db
        db.commit()

    monkeypatch.setattr(maintenance, "get_db_session", _session)
    return db


def test_expire_prebookings(task_db, wheel_product):
    booking, _ = BookingService(task_db).create_booking(
        {
            "product_id": wheel_product.id,
            "slots": [{"date": "2030-03-04", "time": "10:00"}],
            "user_info": {"email": "ana@example.com"},
        }
    )
    booking.expires_at = utc_now() - timedelta(minutes=1)
    task_db.commit()

    assert maintenance.expire_prebookings() == {"expired": 1}
    assert maintenance.expire_prebookings() == {"expired": 0}


def test_cleanup_expired_giftcard_holds(task_db, giftcard):
    hold = GiftcardService(task_db).create_hold("10", code=giftcard.code)["hold"]
    hold.expires_at = utc_now() - timedelta(minutes=1)
    task_db.commit()

    assert maintenance.cleanup_expired_giftcard_holds() == {"deleted": 1}


def test_mark_overdue_deliveries(task_db):
    DeliveryService(task_db).create_delivery(
        {
            "customer_email": "ana@example.com",
            "description": "Plato hondo",
            "scheduled_date": "2020-05-01",
        }
    )

    assert maintenance.mark_overdue_deliveries() == {"updated": 1}


def test_production_schedule_uses_maintenance_queue():
    schedule = get_beat_schedule("production")

    assert schedule is CELERYBEAT_SCHEDULE
    assert {entry["options"]["queue"] for entry in schedule.values()} == {"maintenance"}
    assert schedule["expire-prebookings"]["schedule"] == timedelta(minutes=10)
    assert isinstance(schedule["mark-overdue-deliveries"]["schedule"], crontab)


def test_local_schedule_uses_default_queue():
    schedule = get_beat_schedule("development")

    assert set(schedule) == set(CELERYBEAT_SCHEDULE)
    assert {entry["options"]["queue"] for entry in schedule.values()} == {"celery"}
    # The shared production entries are left untouched
    assert CELERYBEAT_SCHEDULE["expire-prebookings"]["options"]["queue"] == "maintenance"


def test_tasks_are_registered():
    from app.tasks import celery_app

    assert "app.tasks.maintenance.expire_prebookings" in celery_app.tasks
    assert "app.tasks.health_check" in celery_app.tasks
