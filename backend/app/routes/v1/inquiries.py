# backend/app/routes/v1/inquiries.py
"""
Group inquiry routes - API v1

Endpoints:
    GET /                       → List inquiries, optionally by status
    POST /                      → Submit an inquiry (public form)
    PATCH /{inquiry_id}         → Move an inquiry to another status
    DELETE /{inquiry_id}        → Delete an inquiry
"""

import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...api.dependencies import get_inquiry_service
from ...core.enums import InquiryStatus
from ...core.exceptions import DomainException
from ...schemas.inquiry import (
    InquiryCreate,
    InquiryListResponse,
    InquiryResponse,
    InquiryStatusUpdate,
)
from ...services.inquiry_service import InquiryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["inquiries-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=InquiryListResponse)
def list_inquiries(
    status_filter: Optional[InquiryStatus] = Query(None, alias="status"),
    service: InquiryService = Depends(get_inquiry_service),
) -> InquiryListResponse:
    inquiries = service.list_inquiries(status_filter.value if status_filter else None)
    return InquiryListResponse(
        inquiries=[InquiryResponse.model_validate(i) for i in inquiries], total=len(inquiries)
    )


@router.post("", response_model=InquiryResponse, status_code=status.HTTP_201_CREATED)
def create_inquiry(
    payload: InquiryCreate,
    service: InquiryService = Depends(get_inquiry_service),
) -> InquiryResponse:
    try:
        inquiry = service.create_inquiry(payload.model_dump())
    except DomainException as exc:
        handle_domain_exception(exc)
    return InquiryResponse.model_validate(inquiry)


@router.patch("/{inquiry_id}", response_model=InquiryResponse)
def update_inquiry_status(
    inquiry_id: str,
    payload: InquiryStatusUpdate,
    service: InquiryService = Depends(get_inquiry_service),
) -> InquiryResponse:
    try:
        inquiry = service.update_status(inquiry_id, payload.status)
    except DomainException as exc:
        handle_domain_exception(exc)
    return InquiryResponse.model_validate(inquiry)


@router.delete("/{inquiry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inquiry(
    inquiry_id: str,
    service: InquiryService = Depends(get_inquiry_service),
) -> Response:
    try:
        service.delete_inquiry(inquiry_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
