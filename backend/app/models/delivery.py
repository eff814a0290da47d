# backend/app/models/delivery.py
"""
Delivery model: finished pieces waiting to be picked up by customers.

A piece is scheduled for a date, marked ready once fired and glazed, and
completed when handed over. Ready pieces are kept for a limited time.
"""

from sqlalchemy import Column, Date, DateTime, String, Text
from sqlalchemy.sql import func
import ulid

from ..core.enums import DeliveryStatus
from ..core.timezone_utils import utc_now
from ..database import Base
from .types import JSONDocument


class Delivery(Base):
    __tablename__ = "deliveries"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    customer_email = Column(String(255), nullable=False, index=True)
    customer_name = Column(String(200), nullable=True)
    description = Column(Text, nullable=False)
    scheduled_date = Column(Date, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=DeliveryStatus.PENDING.value, index=True)
    ready_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    photos = Column(JSONDocument, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    def __repr__(self) -> str:
        return f"<Delivery {self.id} {self.customer_email} {self.status}>"
