from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from app.core.timezone_utils import utc_now
from app.models.giftcard import GiftcardEvent, GiftcardHold, GiftcardRequest
from app.repositories.giftcard_repository import (
    GiftcardEventRepository,
    GiftcardHoldRepository,
    GiftcardRepository,
)


def _hold(giftcard, amount, minutes, booking_id=None):
    return GiftcardHold(
        giftcard_id=giftcard.id,
        booking_id=booking_id,
        amount=Decimal(amount),
        expires_at=utc_now() + timedelta(minutes=minutes),
    )


def test_get_expired_is_oldest_first_and_limited(db, giftcard):
    repo = GiftcardHoldRepository(db)
    newest = _hold(giftcard, "1.00", -1)
    oldest = _hold(giftcard, "2.00", -30)
    middle = _hold(giftcard, "3.00", -10)
    db.add_all([newest, oldest, middle, _hold(giftcard, "4.00", 10)])
    db.commit()

    assert [h.id for h in repo.get_expired(utc_now())] == [oldest.id, middle.id, newest.id]
    assert [h.id for h in repo.get_expired(utc_now(), limit=2)] == [oldest.id, middle.id]


def test_sum_active_holds_ignores_expired(db, giftcard):
    repo = GiftcardHoldRepository(db)
    db.add_all([_hold(giftcard, "10.00", 5), _hold(giftcard, "5.50", 5), _hold(giftcard, "7", -5)])
    db.commit()

    assert repo.sum_active_holds(giftcard.id, utc_now()) == Decimal("15.50")
    assert repo.sum_active_holds("01UNKNOWNGIFTCARD000000000", utc_now()) == Decimal("0")


def test_list_for_booking(db, giftcard):
    repo = GiftcardHoldRepository(db)
    mine = _hold(giftcard, "10.00", 5, booking_id="01BOOKING0000000000000000A")
    db.add_all([mine, _hold(giftcard, "5.00", 5, booking_id="01BOOKING0000000000000000B")])
    db.commit()

    assert [h.id for h in repo.list_for_booking("01BOOKING0000000000000000A")] == [mine.id]


def test_get_by_code_is_case_insensitive(db, giftcard):
    repo = GiftcardRepository(db)

    assert repo.get_by_code(" gc-test01 ").id == giftcard.id
    assert repo.code_exists("GC-TEST01") is True
    assert repo.code_exists("GC-NOPE00") is False


def test_events_for_request_in_order(db):
    request = GiftcardRequest(
        buyer_name="Luis",
        buyer_email="luis@example.com",
        recipient_name="Marta",
        amount=Decimal("40.00"),
        code="REQ-0001",
        request_metadata={},
    )
    db.add(request)
    db.commit()
    now = utc_now()
    db.add_all(
        [
            GiftcardEvent(
                giftcard_request_id=request.id,
                event_type="approved",
                admin_user="admin",
                created_at=now,
            ),
            GiftcardEvent(
                giftcard_request_id=request.id,
                event_type="rejected",
                admin_user="admin",
                created_at=now - timedelta(hours=1),
            ),
        ]
    )
    db.commit()

    events = GiftcardEventRepository(db).list_for_request(request.id)

    assert [e.event_type for e in events] == ["rejected", "approved"]
