# backend/app/models/product.py
"""
Product catalog model.

Products are what customers buy: class packages, single classes, group
experiences and open-studio subscriptions. Bookings snapshot the product
at booking time, so editing a product never rewrites history.
"""

from typing import Any, Dict

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.sql import func
import ulid

from ..core.enums import ProductType
from ..core.timezone_utils import utc_now
from ..database import Base
from .types import JSONDocument


class Product(Base):
    __tablename__ = "products"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(200), nullable=False)
    type = Column(String(40), nullable=False, default=ProductType.SINGLE_CLASS.value, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    sessions = Column(Integer, nullable=False, default=1)
    description = Column(Text, nullable=True)
    details = Column(JSONDocument, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=utc_now)

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_product_price_non_negative"),
        CheckConstraint("sessions > 0", name="check_product_sessions_positive"),
    )

    def snapshot(self) -> Dict[str, Any]:
        """Frozen copy stored on bookings."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "price": str(self.price),
            "sessions": self.sessions,
            "description": self.description,
            "details": dict(self.details or {}),
        }

    def __repr__(self) -> str:
        return f"<Product {self.id} {self.name!r} {self.type}>"
