"""Schemas for the customer directory."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from ._strict_base import StrictModel, StrictRequestModel
from .base import Money
from .booking import BookingResponse
from .delivery import DeliveryResponse


class CustomerSummary(StrictModel):
    email: str
    user_info: Dict[str, Any]
    total_bookings: int
    total_spent: Money
    last_booking_date: Optional[datetime] = None


class CustomerListResponse(StrictModel):
    customers: List[CustomerSummary]
    total: int
    page: int
    limit: int


class CustomerDetail(CustomerSummary):
    bookings: List[BookingResponse] = Field(default_factory=list)
    deliveries: List[DeliveryResponse] = Field(default_factory=list)


class CustomerInfoUpdate(StrictRequestModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    country_code: Optional[str] = None
    birthday: Optional[str] = None


class CustomerDeleteResponse(StrictModel):
    bookings: int
    deliveries: int
    invoice_requests: int
