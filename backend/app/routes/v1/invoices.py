# backend/app/routes/v1/invoices.py
"""
Invoice request routes - API v1

Requests are created at checkout (``invoice_data`` on the booking payload).

Endpoints:
    GET /                          → List invoice requests, optionally by status
    POST /{invoice_id}/process     → Mark a request processed
    DELETE /{invoice_id}           → Delete a request
"""

import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...api.dependencies import get_invoice_service
from ...core.enums import InvoiceStatus
from ...core.exceptions import DomainException
from ...schemas.invoice import InvoiceRequestListResponse, InvoiceRequestResponse
from ...services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["invoices-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=InvoiceRequestListResponse)
def list_invoices(
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRequestListResponse:
    invoices = service.list_requests(status_filter.value if status_filter else None)
    return InvoiceRequestListResponse(
        invoices=[InvoiceRequestResponse(**InvoiceService.to_dict(i)) for i in invoices],
        total=len(invoices),
    )


@router.post("/{invoice_id}/process", response_model=InvoiceRequestResponse)
def mark_processed(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRequestResponse:
    try:
        invoice = service.mark_processed(invoice_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return InvoiceRequestResponse(**InvoiceService.to_dict(invoice))


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
) -> Response:
    try:
        service.delete_request(invoice_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
