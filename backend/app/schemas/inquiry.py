"""Schemas for group inquiries."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from ..core.enums import InquiryStatus, InquiryType
from ._strict_base import ORMResponseModel, StrictModel, StrictRequestModel


class InquiryCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = None
    country_code: Optional[str] = Field(None, max_length=8)
    participants: int = Field(1, ge=1)
    tentative_date: Optional[date] = None
    tentative_time: Optional[str] = None
    event_type: Optional[str] = None
    inquiry_type: InquiryType = InquiryType.GROUP
    message: Optional[str] = None


class InquiryStatusUpdate(StrictRequestModel):
    status: InquiryStatus


class InquiryResponse(ORMResponseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    country_code: Optional[str] = None
    participants: int
    tentative_date: Optional[date] = None
    tentative_time: Optional[str] = None
    event_type: Optional[str] = None
    inquiry_type: str
    message: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None


class InquiryListResponse(StrictModel):
    inquiries: List[InquiryResponse]
    total: int
