"""Tests for CustomerService: aggregation by email, edits and deletion."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from app.core.exceptions import NotFoundException, ValidationException
from app.core.timezone_utils import utc_now
from app.models.booking import Booking
from app.models.delivery import Delivery
from app.models.giftcard import GiftcardHold
from app.models.invoice import InvoiceRequest
from app.services.customer_service import CustomerService


@pytest.fixture
def service(db):
    return CustomerService(db)


def _booking(db, code, email, *, days_ago, paid=(), status="active", first_name="Ana"):
    booking = Booking(
        booking_code=code,
        product_type="SINGLE_CLASS",
        slots=[{"date": "2030-03-04", "time": "10:00", "instructor_id": None}],
        user_info={"email": email, "first_name": first_name, "phone": "555"},
        customer_email=email,
        participants=1,
        price=Decimal("25.00"),
        payment_details=[
            {"id": f"{code}-{i}", "amount": amount, "method": "Cash"}
            for i, amount in enumerate(paid)
        ],
        status=status,
        created_at=utc_now() - timedelta(days=days_ago),
    )
    db.add(booking)
    db.commit()
    return booking


@pytest.fixture
def bookings(db):
    return [
        _booking(db, "C-ANA-OLD", "ana@example.com", days_ago=30, paid=[25], first_name="Anita"),
        _booking(db, "C-ANA-NEW", "ana@example.com", days_ago=2, paid=[10, 5.5]),
        _booking(db, "C-LUIS", "luis@example.com", days_ago=5, first_name="Luis"),
        _booking(db, "C-GONE", "eva@example.com", days_ago=1, status="expired"),
    ]


class TestListing:
    def test_groups_bookings_by_email(self, service, bookings):
        customers, total = service.list_customers()

        assert total == 2
        assert [c["email"] for c in customers] == ["ana@example.com", "luis@example.com"]
        ana = customers[0]
        assert ana["total_bookings"] == 2
        assert ana["total_spent"] == Decimal("40.5")
        assert ana["user_info"]["first_name"] == "Ana"
        assert [b.booking_code for b in ana["bookings"]] == ["C-ANA-NEW", "C-ANA-OLD"]
        assert customers[1]["total_spent"] == Decimal("0")

    def test_pagination(self, service, bookings):
        customers, total = service.list_customers(page=2, limit=1)

        assert total == 2
        assert [c["email"] for c in customers] == ["luis@example.com"]

        with pytest.raises(ValidationException):
            service.list_customers(page=0)

    def test_get_customer_includes_deliveries(self, service, db, bookings):
        db.add(
            Delivery(
                customer_email="ana@example.com",
                description="Taza esmaltada",
                scheduled_date=date(2030, 4, 1),
            )
        )
        db.commit()

        customer = service.get_customer(" ANA@example.com ")

        assert customer["total_bookings"] == 2
        assert [d.description for d in customer["deliveries"]] == ["Taza esmaltada"]

    def test_unknown_customer(self, service):
        with pytest.raises(NotFoundException) as exc_info:
            service.get_customer("nobody@example.com")
        assert exc_info.value.code == "customer_not_found"


class TestUpdateInfo:
    def test_merges_into_every_booking(self, service, db, bookings):
        service.update_customer_info("ana@example.com", {"phone": "600", "last_name": "Torres"})

        for code in ("C-ANA-OLD", "C-ANA-NEW"):
            info = db.query(Booking).filter_by(booking_code=code).one().user_info
            assert info["phone"] == "600"
            assert info["last_name"] == "Torres"
            assert info["email"] == "ana@example.com"
        assert db.query(Booking).filter_by(booking_code="C-ANA-OLD").one().user_info[
            "first_name"
        ] == "Anita"
        assert db.query(Booking).filter_by(booking_code="C-LUIS").one().user_info["phone"] == "555"

    def test_email_cannot_be_edited(self, service, bookings):
        with pytest.raises(ValidationException) as exc_info:
            service.update_customer_info("ana@example.com", {"email": "x@example.com"})
        assert exc_info.value.code == "invalid_customer_field"

    def test_unknown_customer(self, service):
        with pytest.raises(NotFoundException):
            service.update_customer_info("nobody@example.com", {"phone": "1"})


class TestDelete:
    def test_removes_everything_for_the_email(self, service, db, bookings, giftcard):
        ana_new = bookings[1]
        db.add_all(
            [
                InvoiceRequest(
                    booking_id=ana_new.id,
                    company_name="Cerámica SL",
                    tax_id="B123",
                    address="Calle 1",
                    email="facturas@example.com",
                ),
                Delivery(
                    customer_email="ana@example.com",
                    description="Plato",
                    scheduled_date=date(2030, 4, 1),
                ),
                GiftcardHold(
                    giftcard_id=giftcard.id,
                    booking_id=ana_new.id,
                    amount=Decimal("10.00"),
                    expires_at=utc_now() + timedelta(minutes=10),
                ),
            ]
        )
        db.commit()

        result = service.delete_customer("ana@example.com")

        assert result == {"bookings": 2, "deliveries": 1, "invoice_requests": 1}
        assert {b.booking_code for b in db.query(Booking).all()} == {"C-LUIS", "C-GONE"}
        assert db.query(InvoiceRequest).count() == 0
        assert db.query(Delivery).count() == 0
        assert db.query(GiftcardHold).count() == 0

    def test_unknown_customer(self, service, bookings):
        with pytest.raises(NotFoundException):
            service.delete_customer("nobody@example.com")
        assert service.list_customers()[1] == 2
