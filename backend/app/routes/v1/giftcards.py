# backend/app/routes/v1/giftcards.py
"""
Giftcard routes - API v1

Endpoints:
    GET /requests                      → List purchase requests
    POST /requests                     → Submit a purchase request
    GET /requests/{id}                 → Request detail with admin events
    POST /requests/{id}/approve        → Approve and issue the card
    POST /requests/{id}/reject         → Reject a request
    DELETE /requests/{id}              → Soft-delete a request
    GET /                              → List issued giftcards
    GET /validate/{code}               → Check a code at checkout
    POST /holds                        → Reserve balance
    POST /holds/cleanup                → Delete expired holds
    POST /holds/{hold_id}/release      → Release a hold
    POST /holds/{hold_id}/consume      → Deduct a held amount
    GET /{giftcard_id}/audit           → Audit trail for a card
"""

import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies import get_giftcard_service, verify_maintenance_secret
from ...core.enums import GiftcardRequestStatus, GiftcardStatus
from ...core.exceptions import DomainException
from ...schemas.giftcard import (
    ExpiredHold,
    GiftcardApprovalResponse,
    GiftcardAuditResponse,
    GiftcardEventResponse,
    GiftcardRequestCreate,
    GiftcardRequestDecision,
    GiftcardRequestDetailResponse,
    GiftcardRequestResponse,
    GiftcardResponse,
    GiftcardValidationResponse,
    HoldCleanupResponse,
    HoldConsume,
    HoldConsumeResponse,
    HoldCreate,
    HoldCreateResponse,
    HoldResponse,
)
from ...services.giftcard_service import GiftcardService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["giftcards-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# Requests


@router.get("/requests", response_model=List[GiftcardRequestResponse])
def list_requests(
    status_filter: Optional[GiftcardRequestStatus] = Query(None, alias="status"),
    service: GiftcardService = Depends(get_giftcard_service),
) -> List[GiftcardRequestResponse]:
    requests = service.list_requests(status_filter.value if status_filter else None)
    return [GiftcardRequestResponse.model_validate(r) for r in requests]


@router.post(
    "/requests", response_model=GiftcardRequestResponse, status_code=status.HTTP_201_CREATED
)
def create_request(
    payload: GiftcardRequestCreate,
    service: GiftcardService = Depends(get_giftcard_service),
) -> GiftcardRequestResponse:
    try:
        request = service.create_request(payload.model_dump())
    except DomainException as exc:
        handle_domain_exception(exc)
    return GiftcardRequestResponse.model_validate(request)


@router.get("/requests/{request_id}", response_model=GiftcardRequestDetailResponse)
def get_request(
    request_id: str,
    service: GiftcardService = Depends(get_giftcard_service),
) -> GiftcardRequestDetailResponse:
    try:
        request, events = service.get_request(request_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return GiftcardRequestDetailResponse(
        request=GiftcardRequestResponse.model_validate(request),
        events=[GiftcardEventResponse.model_validate(e) for e in events],
    )


@router.post("/requests/{request_id}/approve", response_model=GiftcardApprovalResponse)
def approve_request(
    request_id: str,
    payload: GiftcardRequestDecision,
    service: GiftcardService = Depends(get_giftcard_service),
) -> GiftcardApprovalResponse:
    try:
        request, giftcard = service.approve_request(
            request_id, payload.admin_user, note=payload.note
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return GiftcardApprovalResponse(
        request=GiftcardRequestResponse.model_validate(request),
        giftcard=GiftcardResponse.model_validate(giftcard),
    )


@router.post("/requests/{request_id}/reject", response_model=GiftcardRequestResponse)
def reject_request(
    request_id: str,
    payload: GiftcardRequestDecision,
    service: GiftcardService = Depends(get_giftcard_service),
) -> GiftcardRequestResponse:
    try:
        request = service.reject_request(
            request_id, payload.admin_user, reason=payload.reason or payload.note
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return GiftcardRequestResponse.model_validate(request)


@router.delete("/requests/{request_id}", response_model=GiftcardRequestResponse)
def delete_request(
    request_id: str,
    admin_user: Optional[str] = Query(None),
    service: GiftcardService = Depends(get_giftcard_service),
) -> GiftcardRequestResponse:
    try:
        request = service.delete_request(request_id, admin_user=admin_user)
    except DomainException as exc:
        handle_domain_exception(exc)
    return GiftcardRequestResponse.model_validate(request)


# Issued cards


@router.get("", response_model=List[GiftcardResponse])
def list_giftcards(
    status_filter: Optional[GiftcardStatus] = Query(None, alias="status"),
    service: GiftcardService = Depends(get_giftcard_service),
) -> List[GiftcardResponse]:
    giftcards = service.list_giftcards(status_filter.value if status_filter else None)
    return [GiftcardResponse.model_validate(g) for g in giftcards]


@router.get("/validate/{code}", response_model=GiftcardValidationResponse)
def validate_code(
    code: str,
    service: GiftcardService = Depends(get_giftcard_service),
) -> GiftcardValidationResponse:
    try:
        return GiftcardValidationResponse(**service.validate(code))
    except DomainException as exc:
        handle_domain_exception(exc)


# Holds


@router.post("/holds", response_model=HoldCreateResponse, status_code=status.HTTP_201_CREATED)
def create_hold(
    payload: HoldCreate,
    service: GiftcardService = Depends(get_giftcard_service),
) -> HoldCreateResponse:
    try:
        result = service.create_hold(
            payload.amount,
            code=payload.code,
            giftcard_id=payload.giftcard_id,
            ttl_minutes=payload.ttl_minutes,
            booking_id=payload.booking_id,
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return HoldCreateResponse(
        hold=HoldResponse.model_validate(result["hold"]),
        available_balance=result["available_balance"],
        balance=result["balance"],
    )


@router.post(
    "/holds/cleanup",
    response_model=HoldCleanupResponse,
    dependencies=[Depends(verify_maintenance_secret)],
)
def cleanup_expired_holds(
    limit: Optional[int] = Query(None, ge=1, le=10000),
    service: GiftcardService = Depends(get_giftcard_service),
) -> HoldCleanupResponse:
    result = service.cleanup_expired_holds(limit)
    return HoldCleanupResponse(
        deleted=result["deleted"], holds=[ExpiredHold(**h) for h in result["holds"]]
    )


@router.post("/holds/{hold_id}/release", response_model=HoldResponse)
def release_hold(
    hold_id: str,
    service: GiftcardService = Depends(get_giftcard_service),
) -> HoldResponse:
    try:
        return HoldResponse.model_validate(service.release_hold(hold_id))
    except DomainException as exc:
        handle_domain_exception(exc)


@router.post("/holds/{hold_id}/consume", response_model=HoldConsumeResponse)
def consume_hold(
    hold_id: str,
    payload: Optional[HoldConsume] = Body(None),
    service: GiftcardService = Depends(get_giftcard_service),
) -> HoldConsumeResponse:
    try:
        result = service.consume_hold(hold_id, booking_id=payload.booking_id if payload else None)
    except DomainException as exc:
        handle_domain_exception(exc)
    return HoldConsumeResponse(**result)


@router.get("/{giftcard_id}/audit", response_model=List[GiftcardAuditResponse])
def get_audit_trail(
    giftcard_id: str,
    service: GiftcardService = Depends(get_giftcard_service),
) -> List[GiftcardAuditResponse]:
    try:
        entries = service.get_audit_trail(giftcard_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return [GiftcardAuditResponse.model_validate(e) for e in entries]
