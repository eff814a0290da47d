from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import RepositoryException
from app.core.timezone_utils import utc_now
from app.models.booking import Booking
from app.repositories.booking_repository import BookingRepository


def _booking(code, slot_date, *, created_days_ago=0, status="active", email="ana@example.com",
             expires_in=None, is_paid=False):
    now = utc_now()
    return Booking(
        booking_code=code,
        product={"name": "Clase de Torno"},
        technique="potters_wheel",
        slots=[{"date": slot_date, "time": "10:00", "instructor_id": None}],
        user_info={"email": email},
        customer_email=email,
        price=Decimal("25.00"),
        is_paid=is_paid,
        payment_details=[],
        attendance={},
        status=status,
        expires_at=now + expires_in if expires_in is not None else None,
        created_at=now - timedelta(days=created_days_ago),
    )


def test_date_range_finds_bookings_created_long_ago(db):
    repo = BookingRepository(db)
    db.add(_booking("OLD-IN-RANGE", "2030-06-15", created_days_ago=400))
    db.add_all(_booking(f"NEW-{i}", "2030-01-01") for i in range(5))
    db.commit()

    found = repo.list_bookings(start_date=date(2030, 6, 1), end_date=date(2030, 6, 30), limit=3)

    assert [b.booking_code for b in found] == ["OLD-IN-RANGE"]


def test_limit_applies_after_range_filter(db):
    repo = BookingRepository(db)
    db.add_all(
        _booking(f"JUNE-{i}", "2030-06-10", created_days_ago=i) for i in range(4)
    )
    db.add(_booking("JANUARY", "2030-01-10"))
    db.commit()

    found = repo.list_bookings(start_date=date(2030, 6, 1), limit=2)

    assert [b.booking_code for b in found] == ["JUNE-0", "JUNE-1"]


def test_unranged_listing_is_newest_first_and_limited(db):
    repo = BookingRepository(db)
    db.add_all(_booking(f"C-{i}", "2030-01-10", created_days_ago=i) for i in range(4))
    db.commit()

    found = repo.list_bookings(limit=2)

    assert [b.booking_code for b in found] == ["C-0", "C-1"]


def test_listing_filters_status_and_email(db):
    repo = BookingRepository(db)
    db.add(_booking("C-ANA", "2030-01-10"))
    db.add(_booking("C-LUIS", "2030-01-10", email="luis@example.com"))
    db.add(_booking("C-GONE", "2030-01-10", status="expired"))
    db.commit()

    assert [b.booking_code for b in repo.list_bookings(email=" Luis@Example.com ")] == ["C-LUIS"]
    assert [b.booking_code for b in repo.list_bookings(status="expired")] == ["C-GONE"]


def test_seat_holding_bookings(db):
    repo = BookingRepository(db)
    keep = _booking("C-KEEP", "2030-01-10")
    skip = _booking("C-SKIP", "2030-01-10")
    db.add_all([keep, skip, _booking("C-GONE", "2030-01-10", status="expired"),
                _booking("C-LATER", "2030-03-01")])
    db.commit()

    found = repo.get_seat_holding_bookings(
        date(2030, 1, 1), date(2030, 1, 31), exclude_ids=[skip.id, None]
    )

    assert [b.booking_code for b in found] == ["C-KEEP"]


def test_get_expirable_only_returns_lapsed_unpaid_prebookings(db):
    repo = BookingRepository(db)
    db.add_all(
        [
            _booking("C-LAPSED", "2030-01-10", expires_in=timedelta(minutes=-5)),
            _booking("C-RUNNING", "2030-01-10", expires_in=timedelta(hours=1)),
            _booking("C-PAID", "2030-01-10", expires_in=timedelta(minutes=-5), is_paid=True),
            _booking("C-NOEXPIRY", "2030-01-10"),
            _booking(
                "C-DONE", "2030-01-10", status="expired", expires_in=timedelta(minutes=-5)
            ),
        ]
    )
    db.commit()

    found = repo.get_expirable(utc_now())

    assert [b.booking_code for b in found] == ["C-LAPSED"]


def test_list_bookings_wraps_database_errors(db, monkeypatch):
    repo = BookingRepository(db)

    def _boom(*_args, **_kwargs):
        raise SQLAlchemyError("boom")

    monkeypatch.setattr(repo.db, "query", _boom)

    with pytest.raises(RepositoryException):
        repo.list_bookings()
