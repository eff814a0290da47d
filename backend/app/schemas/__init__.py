# backend/app/schemas/__init__.py
"""
Pydantic schemas for the studio platform.

Request models forbid unknown fields; response models read directly from
SQLAlchemy rows.
"""

from .availability import ScheduleSettings, ScheduleSettingsUpdate
from .booking import BookingCreate, BookingResponse, PaymentCreate
from .delivery import DeliveryCreate, DeliveryResponse
from .giftcard import GiftcardRequestCreate, GiftcardResponse, HoldCreate
from .product import ProductCreate, ProductResponse
from .timecard import EmployeeCreate, EmployeeResponse, TimecardResponse

__all__ = [
    "BookingCreate",
    "BookingResponse",
    "DeliveryCreate",
    "DeliveryResponse",
    "EmployeeCreate",
    "EmployeeResponse",
    "GiftcardRequestCreate",
    "GiftcardResponse",
    "HoldCreate",
    "PaymentCreate",
    "ProductCreate",
    "ProductResponse",
    "ScheduleSettings",
    "ScheduleSettingsUpdate",
    "TimecardResponse",
]
