# backend/app/models/booking.py
"""
Booking model for the studio platform.

A booking reserves seats for one customer (and their party) in one or more
scheduled class slots. Product, customer and slot data are stored as JSON
documents on the row, so a booking stays readable even if the product or
schedule later changes.

Unpaid bookings are pre-reservations: they hold seats until ``expires_at``
and are then marked expired by the maintenance task.
"""

from datetime import datetime
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func
import ulid

from ..core.enums import BookingMode, BookingStatus
from ..core.timezone_utils import utc_now
from ..database import Base
from .types import JSONDocument

logger = logging.getLogger(__name__)


def slot_key(slot: Dict[str, Any]) -> str:
    """Attendance key for a slot: ``YYYY-MM-DD_HH:MM``."""
    return f"{slot.get('date')}_{slot.get('time')}"


def payment_entry(
    amount: Decimal,
    method: str,
    *,
    note: Optional[str] = None,
    received_at: Optional[datetime] = None,
    payment_id: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """JSON-safe payment document for ``Booking.payment_details``."""
    entry: Dict[str, Any] = {
        "id": payment_id or str(ulid.ULID()),
        "amount": float(Decimal(str(amount)).quantize(Decimal("0.01"))),
        "method": method,
        "received_at": (received_at or utc_now()).isoformat(),
        "note": note,
    }
    entry.update({k: v for k, v in extra.items() if v is not None})
    return entry


class Booking(Base):
    """
    Customer reservation for one or more class slots.

    ``slots`` is a list of ``{"date", "time", "instructor_id"}`` documents;
    ``payment_details`` a list of ``{"id", "amount", "method", "received_at",
    "note"}``. Both are reassigned, never mutated in place, so SQLAlchemy sees
    the change.
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    booking_code = Column(String(40), nullable=False, unique=True, index=True)

    # Product snapshot
    product_id = Column(String(26), ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    product_type = Column(String(40), nullable=True)
    product = Column(JSONDocument, nullable=True)
    technique = Column(String(30), nullable=True)

    # Schedule and customer
    slots = Column(JSONDocument, nullable=False, default=list)
    user_info = Column(JSONDocument, nullable=False, default=dict)
    customer_email = Column(String(255), nullable=True, index=True)
    participants = Column(Integer, nullable=False, default=1)
    booking_mode = Column(String(20), nullable=False, default=BookingMode.FLEXIBLE.value)
    booking_date = Column(Date, nullable=True)
    client_note = Column(Text, nullable=True)
    attendance = Column(JSONDocument, nullable=False, default=dict)
    accepted_no_refund = Column(Boolean, nullable=False, default=False)

    # Money
    price = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    is_paid = Column(Boolean, nullable=False, default=False)
    payment_details = Column(JSONDocument, nullable=False, default=list)
    giftcard_id = Column(String(26), ForeignKey("giftcards.id", ondelete="SET NULL"), nullable=True)
    giftcard_redeemed_amount = Column(Numeric(10, 2), nullable=True)

    # Lifecycle
    status = Column(String(20), nullable=False, default=BookingStatus.ACTIVE.value, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    __table_args__ = (
        CheckConstraint("participants > 0", name="check_participants_positive"),
        CheckConstraint("price >= 0", name="check_booking_price_non_negative"),
        CheckConstraint("status IN ('active', 'paid', 'expired')", name="check_booking_status"),
    )

    def __repr__(self) -> str:
        return f"<Booking {self.booking_code} status={self.status} slots={len(self.slots or [])}>"

    @property
    def payments(self) -> List[Dict[str, Any]]:
        return list(self.payment_details or [])

    def total_paid(self) -> Decimal:
        return sum((Decimal(str(p.get("amount", 0))) for p in self.payments), Decimal("0"))

    def refresh_payment_state(self) -> None:
        """
        Recompute ``is_paid`` from the payment list.

        A fully paid pre-reservation becomes ``paid`` and stops expiring; a
        booking that loses payments goes back to ``active`` with its expiry
        left untouched.
        """
        price = Decimal(str(self.price or 0))
        self.is_paid = self.total_paid() >= price
        if self.status == BookingStatus.EXPIRED.value:
            return
        if self.is_paid:
            self.status = BookingStatus.PAID.value
            self.expires_at = None
        else:
            self.status = BookingStatus.ACTIVE.value

    def expire(self, when: Optional[datetime] = None) -> None:
        self.status = BookingStatus.EXPIRED.value
        self.updated_at = when or utc_now()
        logger.info("Booking %s expired", self.booking_code)
