"""Schemas for deliveries of finished pieces."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from ..core.enums import DeliveryStatus
from ._strict_base import ORMResponseModel, StrictModel, StrictRequestModel


class DeliveryCreate(StrictRequestModel):
    customer_email: EmailStr
    customer_name: Optional[str] = None
    description: str = Field(..., min_length=1)
    scheduled_date: date
    notes: Optional[str] = None
    photos: List[str] = Field(default_factory=list)


class DeliveryUpdate(StrictRequestModel):
    customer_email: Optional[EmailStr] = None
    customer_name: Optional[str] = None
    description: Optional[str] = Field(None, min_length=1)
    scheduled_date: Optional[date] = None
    status: Optional[DeliveryStatus] = None
    notes: Optional[str] = None
    photos: Optional[List[str]] = None


class DeliveryReady(StrictRequestModel):
    ready_at: Optional[datetime] = None


class DeliveryComplete(StrictRequestModel):
    delivered_at: Optional[datetime] = None
    notes: Optional[str] = None


class DeliveryTimeline(StrictModel):
    days_until_scheduled: int
    scheduled_status: str
    ready_expires_at: Optional[datetime] = None
    ready_status: Optional[str] = None
    critically_urgent: bool


class DeliveryResponse(ORMResponseModel):
    id: str
    customer_email: str
    customer_name: Optional[str] = None
    description: str
    scheduled_date: date
    status: str
    ready_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    timeline: Optional[DeliveryTimeline] = None


class DeliveryListResponse(StrictModel):
    deliveries: List[DeliveryResponse]
    total: int


class OverdueResponse(StrictModel):
    updated: int
