"""Schemas for bookings: checkout payload, payments, slot edits and responses."""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ..core.enums import AttendanceStatus, BookingMode, PaymentMethod
from ._strict_base import ORMResponseModel, StrictModel, StrictRequestModel
from .base import Money


class SlotRef(BaseModel):
    date: date
    time: str
    instructor_id: Optional[str] = None

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        parts = value.strip().split(":")
        if len(parts) < 2 or not all(p.isdigit() for p in parts):
            raise ValueError("time must be HH:MM")
        return value.strip()


class CustomerInfo(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None


class PaymentCreate(StrictRequestModel):
    amount: Money = Field(..., gt=0)
    method: PaymentMethod = PaymentMethod.CASH
    note: Optional[str] = None
    received_at: Optional[datetime] = None


class PaymentUpdate(StrictRequestModel):
    amount: Optional[Money] = Field(None, gt=0)
    method: Optional[PaymentMethod] = None
    note: Optional[str] = None
    received_at: Optional[datetime] = None


class PaymentDelete(StrictRequestModel):
    reason: Optional[str] = None


class InvoiceData(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=200)
    tax_id: str = Field(..., min_length=1, max_length=40)
    address: str = Field(..., min_length=1)
    email: EmailStr


class BookingCreate(StrictRequestModel):
    """Checkout payload. ``booking_code`` makes retries idempotent."""

    booking_code: Optional[str] = None
    product_id: Optional[str] = None
    product: Optional[Dict[str, Any]] = None
    product_type: Optional[str] = None
    technique: Optional[str] = None
    slots: List[SlotRef] = Field(default_factory=list)
    user_info: CustomerInfo
    participants: int = Field(1, ge=1)
    price: Optional[Money] = Field(None, ge=0)
    booking_mode: BookingMode = BookingMode.FLEXIBLE
    booking_date: Optional[date] = None
    client_note: Optional[str] = None
    accepted_no_refund: bool = False
    admin_override: bool = False
    payment_details: List[PaymentCreate] = Field(default_factory=list)
    giftcard_hold_id: Optional[str] = None
    giftcard_code: Optional[str] = None
    giftcard_id: Optional[str] = None
    giftcard_amount: Optional[Money] = Field(None, gt=0)
    invoice_data: Optional[InvoiceData] = None


class RescheduleRequest(StrictRequestModel):
    old_slot: SlotRef
    new_slot: SlotRef
    admin_override: bool = False


class RemoveSlotRequest(StrictRequestModel):
    slot: SlotRef


class AttendanceUpdate(StrictRequestModel):
    date: date
    time: str
    status: AttendanceStatus


class PaymentResponse(BaseModel):
    id: str
    amount: float
    method: str
    received_at: Optional[str] = None
    note: Optional[str] = None
    giftcard_id: Optional[str] = None
    giftcard_code: Optional[str] = None


class BookingResponse(ORMResponseModel):
    id: str
    booking_code: str
    product_id: Optional[str] = None
    product_type: Optional[str] = None
    product: Optional[Dict[str, Any]] = None
    technique: Optional[str] = None
    slots: List[Dict[str, Any]]
    user_info: Dict[str, Any]
    participants: int
    booking_mode: str
    booking_date: Optional[date] = None
    client_note: Optional[str] = None
    attendance: Dict[str, str] = Field(default_factory=dict)
    accepted_no_refund: bool
    price: Money
    is_paid: bool
    payment_details: List[PaymentResponse]
    giftcard_id: Optional[str] = None
    giftcard_redeemed_amount: Optional[Money] = None
    status: str
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class BookingCreateResponse(StrictModel):
    booking: BookingResponse
    created: bool


class BookingListResponse(StrictModel):
    bookings: List[BookingResponse]
    total: int


class RemoveSlotResponse(StrictModel):
    deleted: bool
    booking: Optional[BookingResponse] = None


class RangeDeleteResponse(StrictModel):
    updated: int
    deleted: int


class ExpireResponse(StrictModel):
    expired: int


class TechniqueIssue(StrictModel):
    booking_id: str
    booking_code: str
    product_name: Optional[str] = None
    stored: Optional[str] = None
    expected: str


class TechniqueReportResponse(StrictModel):
    issues: List[TechniqueIssue]
    fixed: bool = False
