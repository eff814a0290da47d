"""Schemas for giftcard requests, issued cards, holds and audit entries."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field

from ._strict_base import ORMResponseModel, StrictModel, StrictRequestModel
from .base import Money


class GiftcardRequestCreate(StrictRequestModel):
    buyer_name: str = Field(..., min_length=1)
    buyer_email: EmailStr
    recipient_name: str = Field(..., min_length=1)
    recipient_email: Optional[EmailStr] = None
    recipient_whatsapp: Optional[str] = None
    buyer_message: Optional[str] = None
    amount: Money = Field(..., gt=0)
    code: Optional[str] = None


class GiftcardRequestDecision(StrictRequestModel):
    admin_user: str = Field(..., min_length=1)
    note: Optional[str] = None
    reason: Optional[str] = None


class GiftcardRequestResponse(ORMResponseModel):
    id: str
    buyer_name: str
    buyer_email: str
    recipient_name: str
    recipient_email: Optional[str] = None
    recipient_whatsapp: Optional[str] = None
    buyer_message: Optional[str] = None
    amount: Money
    code: str
    status: str
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="request_metadata")
    created_at: Optional[datetime] = None


class GiftcardEventResponse(ORMResponseModel):
    id: str
    event_type: str
    admin_user: Optional[str] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None


class GiftcardRequestDetailResponse(StrictModel):
    request: GiftcardRequestResponse
    events: List[GiftcardEventResponse]


class GiftcardResponse(ORMResponseModel):
    id: str
    code: str
    initial_value: Money
    balance: Money
    status: str
    expires_at: Optional[datetime] = None
    giftcard_request_id: Optional[str] = None
    buyer_info: Optional[Dict[str, Any]] = None
    recipient_info: Optional[Dict[str, Any]] = None
    redeemed_history: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class GiftcardApprovalResponse(StrictModel):
    request: GiftcardRequestResponse
    giftcard: GiftcardResponse


class GiftcardValidationResponse(StrictModel):
    valid: bool
    type: str
    giftcard_id: Optional[str] = None
    code: str
    balance: Money
    available_balance: Money
    initial_value: Money
    expires_at: Optional[datetime] = None
    status: str


class HoldCreate(StrictRequestModel):
    amount: Money = Field(..., gt=0)
    code: Optional[str] = None
    giftcard_id: Optional[str] = None
    ttl_minutes: Optional[int] = Field(None, ge=1, le=24 * 60)
    booking_id: Optional[str] = None


class HoldConsume(StrictRequestModel):
    booking_id: Optional[str] = None


class HoldResponse(ORMResponseModel):
    id: str
    giftcard_id: str
    booking_id: Optional[str] = None
    amount: Money
    expires_at: datetime
    created_at: Optional[datetime] = None


class HoldCreateResponse(StrictModel):
    hold: HoldResponse
    available_balance: Money
    balance: Money


class HoldConsumeResponse(StrictModel):
    giftcard_id: str
    amount: Money
    new_balance: Money
    booking_id: Optional[str] = None


class ExpiredHold(StrictModel):
    id: str
    giftcard_id: str
    booking_id: Optional[str] = None
    amount: Money
    expires_at: datetime


class HoldCleanupResponse(StrictModel):
    deleted: int
    holds: List[ExpiredHold]


class GiftcardAuditResponse(ORMResponseModel):
    id: str
    giftcard_id: Optional[str] = None
    hold_id: Optional[str] = None
    booking_id: Optional[str] = None
    action: str
    status: str
    amount: Optional[Money] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="audit_metadata")
    created_at: Optional[datetime] = None
