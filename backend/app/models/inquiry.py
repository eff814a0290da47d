# backend/app/models/inquiry.py
"""
Group inquiry model: requests for private groups, couples or team events.

Inquiries are handled by hand; the admin moves them through a small
status pipeline until the event is confirmed or archived.
"""

from sqlalchemy import Column, Date, DateTime, Integer, String, Text
from sqlalchemy.sql import func
import ulid

from ..core.enums import InquiryStatus, InquiryType
from ..core.timezone_utils import utc_now
from ..database import Base


class Inquiry(Base):
    __tablename__ = "inquiries"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(40), nullable=True)
    country_code = Column(String(8), nullable=True)
    participants = Column(Integer, nullable=False, default=1)
    tentative_date = Column(Date, nullable=True)
    tentative_time = Column(String(5), nullable=True)
    event_type = Column(String(120), nullable=True)
    inquiry_type = Column(String(20), nullable=False, default=InquiryType.GROUP.value)
    message = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=InquiryStatus.NEW.value, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    def __repr__(self) -> str:
        return f"<Inquiry {self.id} {self.email} {self.status}>"
