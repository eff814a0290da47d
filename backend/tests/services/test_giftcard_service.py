"""Tests for GiftcardService requests, validation and balance holds."""

from datetime import timedelta
from decimal import Decimal

import pytest

from app.core.exceptions import (
    ConflictException,
    HoldExpiredException,
    InsufficientBalanceException,
    NotFoundException,
    ServiceException,
    ValidationException,
)
from app.core.timezone_utils import utc_now
from app.models.booking import Booking
from app.models.giftcard import Giftcard, GiftcardAudit, GiftcardEvent, GiftcardHold
from app.models.notification import Notification
from app.services.giftcard_service import GiftcardService

REQUEST = {
    "buyer_name": "Luis Vera",
    "buyer_email": "Luis@Example.com",
    "recipient_name": "Marta",
    "recipient_whatsapp": "+593999000111",
    "amount": "40",
}


@pytest.fixture
def service(db):
    return GiftcardService(db)


def _booking(db, price="50.00"):
    booking = Booking(
        booking_code="C-GIFT1",
        product={"name": "Pintura de piezas"},
        technique="painting",
        slots=[{"date": "2030-03-04", "time": "10:00"}],
        user_info={"email": "ana@example.com"},
        customer_email="ana@example.com",
        price=Decimal(price),
        payment_details=[],
    )
    db.add(booking)
    db.commit()
    return booking


class TestRequests:
    def test_create_request(self, service, db):
        request = service.create_request(REQUEST)

        assert request.status == "pending"
        assert request.buyer_email == "luis@example.com"
        assert request.amount == Decimal("40.00")
        assert request.code
        assert db.query(Notification).one().type == "giftcard_request"

    def test_create_request_reports_missing_fields(self, service):
        with pytest.raises(ValidationException) as exc_info:
            service.create_request({"buyer_name": "Luis"})
        assert exc_info.value.code == "missing_fields"
        assert set(exc_info.value.details["missing"]) == {
            "buyer_email",
            "recipient_name",
            "amount",
        }

    def test_create_request_rejects_zero_amount(self, service):
        with pytest.raises(ValidationException) as exc_info:
            service.create_request({**REQUEST, "amount": 0})
        assert exc_info.value.code == "invalid_amount"

    def test_approve_issues_giftcard(self, service, db):
        request = service.create_request(REQUEST)

        request, giftcard = service.approve_request(request.id, "admin", note="ok")

        assert request.status == "approved"
        assert request.approved_by == "admin"
        assert request.request_metadata["issued_code"] == giftcard.code
        assert giftcard.balance == Decimal("40.00")
        assert giftcard.initial_value == Decimal("40.00")
        assert giftcard.status == "active"
        assert giftcard.recipient_info["name"] == "Marta"
        assert giftcard.expires_at > utc_now() + timedelta(days=85)
        assert giftcard.expires_at < utc_now() + timedelta(days=95)
        events = db.query(GiftcardEvent).all()
        assert [(e.event_type, e.admin_user, e.note) for e in events] == [
            ("approved", "admin", "ok")
        ]

    def test_approve_retries_code_collisions(self, service, giftcard, monkeypatch):
        request = service.create_request(REQUEST)
        codes = iter(["GC-TEST01", "GC-TEST01", "GC-FRESH1"])
        monkeypatch.setattr(
            "app.services.giftcard_service.generate_giftcard_code", lambda *args: next(codes)
        )

        _, issued = service.approve_request(request.id, "admin")

        assert issued.code == "GC-FRESH1"

    def test_approve_gives_up_after_repeated_collisions(self, service, db, giftcard, monkeypatch):
        request = service.create_request(REQUEST)
        attempts = []

        def colliding_code(*args):
            attempts.append(args)
            return "GC-TEST01"

        monkeypatch.setattr("app.services.giftcard_service.generate_giftcard_code", colliding_code)

        with pytest.raises(ServiceException) as exc_info:
            service.approve_request(request.id, "admin")

        assert exc_info.value.code == "code_generation_failed"
        assert len(attempts) == 4
        db.refresh(request)
        assert request.status == "pending"
        assert db.query(Giftcard).count() == 1
        assert db.query(GiftcardEvent).count() == 0

    def test_get_request_lists_events(self, service):
        request = service.create_request(REQUEST)
        service.reject_request(request.id, "admin", reason="duplicate")

        found, events = service.get_request(request.id)

        assert found.id == request.id
        assert [(e.event_type, e.admin_user) for e in events] == [("rejected", "admin")]

    def test_approve_twice_conflicts(self, service):
        request = service.create_request(REQUEST)
        service.approve_request(request.id, "admin")

        with pytest.raises(ConflictException) as exc_info:
            service.approve_request(request.id, "admin")
        assert exc_info.value.code == "request_not_pending"

    def test_approve_requires_admin(self, service):
        request = service.create_request(REQUEST)

        with pytest.raises(ValidationException):
            service.approve_request(request.id, "")

    def test_reject_request(self, service):
        request = service.create_request(REQUEST)

        request = service.reject_request(request.id, "admin", reason="Payment not received")

        assert request.status == "rejected"
        assert request.rejected_by == "admin"
        assert request.request_metadata["reason"] == "Payment not received"
        with pytest.raises(ConflictException):
            service.approve_request(request.id, "admin")

    def test_delete_request_is_soft(self, service):
        request = service.create_request(REQUEST)

        service.delete_request(request.id, "admin")

        assert [r.status for r in service.list_requests()] == ["deleted"]

    def test_unknown_request(self, service):
        with pytest.raises(NotFoundException):
            service.reject_request("missing", "admin")


class TestValidate:
    def test_issued_card(self, service, giftcard):
        result = service.validate("gc-test01 ")

        assert result["valid"] is True
        assert result["type"] == "issued"
        assert result["balance"] == Decimal("50.00")
        assert result["available_balance"] == Decimal("50.00")
        assert result["status"] == "active"

    def test_available_balance_excludes_holds(self, service, giftcard):
        service.create_hold("20", code=giftcard.code)

        result = service.validate(giftcard.code)

        assert result["balance"] == Decimal("50.00")
        assert result["available_balance"] == Decimal("30.00")

    def test_expired_card_is_invalid(self, service, db, giftcard):
        giftcard.expires_at = utc_now() - timedelta(days=1)
        db.commit()

        result = service.validate(giftcard.code)

        assert result["valid"] is False
        assert result["status"] == "expired"

    def test_pending_request_code(self, service):
        request = service.create_request({**REQUEST, "code": "req-0001"})

        result = service.validate("REQ-0001")

        assert result["valid"] is False
        assert result["type"] == "request"
        assert result["status"] == "pending"
        assert result["balance"] == Decimal("40.00")

    def test_unknown_code(self, service):
        with pytest.raises(NotFoundException) as exc_info:
            service.validate("NOPE")
        assert exc_info.value.code == "not_found"

    def test_blank_code(self, service):
        with pytest.raises(ValidationException):
            service.validate("  ")


class TestHolds:
    def test_create_hold(self, service, db, giftcard):
        result = service.create_hold("30", code=giftcard.code, ttl_minutes=10)

        hold = result["hold"]
        assert hold.amount == Decimal("30.00")
        assert result["available_balance"] == Decimal("20.00")
        assert result["balance"] == Decimal("50.00")
        audit = db.query(GiftcardAudit).one()
        assert audit.action == "hold_created"
        assert audit.audit_metadata == {"ttl_minutes": 10}

    def test_holds_cannot_exceed_available_balance(self, service, giftcard):
        service.create_hold("30", giftcard_id=giftcard.id)

        with pytest.raises(InsufficientBalanceException) as exc_info:
            service.create_hold("30", giftcard_id=giftcard.id)
        assert exc_info.value.code == "insufficient_funds"

    def test_hold_requires_card(self, service):
        with pytest.raises(ValidationException) as exc_info:
            service.create_hold("10")
        assert exc_info.value.code == "missing_giftcard"

    def test_hold_on_expired_card(self, service, db, giftcard):
        giftcard.expires_at = utc_now() - timedelta(days=1)
        db.commit()

        with pytest.raises(ValidationException) as exc_info:
            service.create_hold("10", code=giftcard.code)
        assert exc_info.value.code == "giftcard_expired"

    def test_release_hold_restores_availability(self, service, db, giftcard):
        hold = service.create_hold("50", code=giftcard.code)["hold"]

        service.release_hold(hold.id)

        assert db.query(GiftcardHold).count() == 0
        assert service.validate(giftcard.code)["available_balance"] == Decimal("50.00")
        with pytest.raises(NotFoundException):
            service.release_hold(hold.id)

    def test_consume_hold_pays_booking(self, service, db, giftcard):
        booking = _booking(db, price="30.00")
        hold = service.create_hold("30", code=giftcard.code)["hold"]

        result = service.consume_hold(hold.id, booking.id)

        assert result["amount"] == Decimal("30.00")
        assert result["new_balance"] == Decimal("20.00")
        assert result["booking_id"] == booking.id
        db.refresh(booking)
        assert booking.is_paid is True
        assert booking.status == "paid"
        assert booking.payment_details[0]["method"] == "Giftcard"
        assert booking.payment_details[0]["giftcard_code"] == giftcard.code
        db.refresh(giftcard)
        assert giftcard.redeemed_history[0]["booking_id"] == booking.id
        actions = [a.action for a in service.get_audit_trail(giftcard.id)]
        assert sorted(actions) == ["hold_consumed", "hold_created"]

    def test_consume_without_booking_only_deducts(self, service, db, giftcard):
        hold = service.create_hold("50", code=giftcard.code)["hold"]

        result = service.consume_hold(hold.id)

        assert result["booking_id"] is None
        db.refresh(giftcard)
        assert giftcard.balance == Decimal("0.00")
        assert giftcard.status == "depleted"

    def test_consume_expired_hold(self, service, db, giftcard):
        hold = service.create_hold("10", code=giftcard.code)["hold"]
        hold.expires_at = utc_now() - timedelta(seconds=1)
        db.commit()

        with pytest.raises(HoldExpiredException) as exc_info:
            service.consume_hold(hold.id)
        assert exc_info.value.code == "hold_expired"
        db.refresh(giftcard)
        assert giftcard.balance == Decimal("50.00")

    def test_cleanup_expired_holds(self, service, db, giftcard):
        stale = service.create_hold("10", code=giftcard.code)["hold"]
        fresh = service.create_hold("10", code=giftcard.code)["hold"]
        stale.expires_at = utc_now() - timedelta(minutes=5)
        db.commit()

        result = service.cleanup_expired_holds(limit=50)

        assert result["deleted"] == 1
        assert result["holds"][0]["id"] == stale.id
        assert [h.id for h in db.query(GiftcardHold).all()] == [fresh.id]
        reverted = db.query(GiftcardAudit).filter(GiftcardAudit.action == "expire").one()
        assert reverted.status == "reverted"

    def test_audit_trail_for_unknown_card(self, service):
        with pytest.raises(NotFoundException):
            service.get_audit_trail("missing")
