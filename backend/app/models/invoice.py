# backend/app/models/invoice.py
"""Invoice requests raised at checkout for bookings that need a tax invoice."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import InvoiceStatus
from ..core.timezone_utils import utc_now
from ..database import Base


class InvoiceRequest(Base):
    __tablename__ = "invoice_requests"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(
        String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status = Column(String(20), nullable=False, default=InvoiceStatus.PENDING.value, index=True)
    company_name = Column(String(200), nullable=False)
    tax_id = Column(String(40), nullable=False)
    address = Column(Text, nullable=False)
    email = Column(String(255), nullable=False)
    requested_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    processed_at = Column(DateTime(timezone=True), nullable=True)

    booking = relationship("Booking")

    def __repr__(self) -> str:
        return f"<InvoiceRequest {self.id} booking={self.booking_id} {self.status}>"
