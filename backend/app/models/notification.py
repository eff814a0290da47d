# backend/app/models/notification.py
"""Admin inbox notifications (new bookings, deleted payments, ...)."""

from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.sql import func
import ulid

from ..core.timezone_utils import utc_now
from ..database import Base
from .types import JSONDocument


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    type = Column(String(40), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=True)
    booking_id = Column(String(26), nullable=True, index=True)
    data = Column(JSONDocument, nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Notification {self.type} read={self.read}>"
