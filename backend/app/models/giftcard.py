# backend/app/models/giftcard.py
"""
Giftcard models.

Flow:
- A buyer submits a ``GiftcardRequest`` (pending).
- An admin approves it, which issues a ``Giftcard`` with a unique code.
- At checkout a ``GiftcardHold`` reserves part of the balance for a few
  minutes; the hold is either consumed (balance deducted), released, or
  swept away by the expiry task.
- Every balance movement writes a ``GiftcardAudit`` row; admin decisions on
  requests write a ``GiftcardEvent`` row.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import GiftcardRequestStatus, GiftcardStatus
from ..core.timezone_utils import ensure_utc, utc_now
from ..database import Base
from .types import JSONDocument


class GiftcardRequest(Base):
    __tablename__ = "giftcard_requests"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    buyer_name = Column(String(200), nullable=False)
    buyer_email = Column(String(255), nullable=False, index=True)
    recipient_name = Column(String(200), nullable=False)
    recipient_email = Column(String(255), nullable=True)
    recipient_whatsapp = Column(String(40), nullable=True)
    buyer_message = Column(Text, nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    code = Column(String(40), nullable=False, index=True)
    status = Column(
        String(20), nullable=False, default=GiftcardRequestStatus.PENDING.value, index=True
    )
    approved_by = Column(String(120), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejected_by = Column(String(120), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    # "metadata" is reserved on declarative classes
    request_metadata = Column("metadata", JSONDocument, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())

    __table_args__ = (CheckConstraint("amount > 0", name="check_giftcard_request_amount_positive"),)

    def __repr__(self) -> str:
        return f"<GiftcardRequest {self.id} {self.code} {self.status}>"


class Giftcard(Base):
    __tablename__ = "giftcards"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    code = Column(String(40), nullable=False, unique=True, index=True)
    initial_value = Column(Numeric(10, 2), nullable=False)
    balance = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=GiftcardStatus.ACTIVE.value)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    giftcard_request_id = Column(
        String(26), ForeignKey("giftcard_requests.id", ondelete="SET NULL"), nullable=True
    )
    buyer_info = Column(JSONDocument, nullable=True)
    recipient_info = Column(JSONDocument, nullable=True)
    redeemed_history = Column(JSONDocument, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    holds = relationship("GiftcardHold", back_populates="giftcard", cascade="all, delete-orphan")

    __table_args__ = (CheckConstraint("balance >= 0", name="check_giftcard_balance_non_negative"),)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        expires_at = ensure_utc(self.expires_at)
        if expires_at is None:
            return False
        return expires_at <= (now or utc_now())

    def deduct(self, amount: Decimal) -> Decimal:
        """Lower the balance; caller has already checked it is sufficient."""
        self.balance = Decimal(str(self.balance)) - amount
        if self.balance <= 0:
            self.status = GiftcardStatus.DEPLETED.value
        return self.balance

    def __repr__(self) -> str:
        return f"<Giftcard {self.code} balance={self.balance}>"


class GiftcardHold(Base):
    __tablename__ = "giftcard_holds"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    giftcard_id = Column(
        String(26), ForeignKey("giftcards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # No FK: a hold may be taken before its booking exists
    booking_id = Column(String(26), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())

    giftcard = relationship("Giftcard", back_populates="holds")

    __table_args__ = (
        CheckConstraint("amount > 0", name="check_hold_amount_positive"),
        Index("ix_giftcard_holds_expires_at", "expires_at"),
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        expires_at = ensure_utc(self.expires_at)
        assert expires_at is not None
        return expires_at <= (now or utc_now())

    def __repr__(self) -> str:
        return f"<GiftcardHold {self.id} amount={self.amount} expires_at={self.expires_at}>"


class GiftcardAudit(Base):
    __tablename__ = "giftcard_audit"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    giftcard_id = Column(String(26), nullable=True, index=True)
    hold_id = Column(String(26), nullable=True)
    booking_id = Column(String(26), nullable=True)
    action = Column(String(30), nullable=False)
    status = Column(String(20), nullable=False, default="success")
    amount = Column(Numeric(10, 2), nullable=True)
    audit_metadata = Column("metadata", JSONDocument, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())


class GiftcardEvent(Base):
    __tablename__ = "giftcard_events"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    giftcard_request_id = Column(
        String(26),
        ForeignKey("giftcard_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_type = Column(String(30), nullable=False)
    admin_user = Column(String(120), nullable=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
