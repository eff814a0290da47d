# backend/app/routes/v1/customers.py
"""
Customer routes - API v1

Customers are keyed by email; there is no separate customer record.

Endpoints:
    GET /                   → Customers aggregated from bookings, paginated
    GET /{email}            → One customer with bookings and deliveries
    PATCH /{email}          → Merge contact details into every booking
    DELETE /{email}         → Delete the customer's bookings, deliveries and invoices
"""

import logging
from typing import Any, Dict, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import get_customer_service
from ...core.exceptions import DomainException
from ...schemas.booking import BookingResponse
from ...schemas.customer import (
    CustomerDeleteResponse,
    CustomerDetail,
    CustomerInfoUpdate,
    CustomerListResponse,
    CustomerSummary,
)
from ...schemas.delivery import DeliveryResponse
from ...services.customer_service import CustomerService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["customers-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def _summary(customer: Dict[str, Any]) -> CustomerSummary:
    return CustomerSummary(
        email=customer["email"],
        user_info=customer["user_info"],
        total_bookings=customer["total_bookings"],
        total_spent=customer["total_spent"],
        last_booking_date=customer["last_booking_date"],
    )


def _detail(customer: Dict[str, Any]) -> CustomerDetail:
    return CustomerDetail(
        **_summary(customer).model_dump(),
        bookings=[BookingResponse.model_validate(b) for b in customer["bookings"]],
        deliveries=[DeliveryResponse.model_validate(d) for d in customer.get("deliveries", [])],
    )


@router.get("", response_model=CustomerListResponse)
def list_customers(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerListResponse:
    try:
        customers, total = service.list_customers(page=page, limit=limit)
    except DomainException as exc:
        handle_domain_exception(exc)
    return CustomerListResponse(
        customers=[_summary(c) for c in customers], total=total, page=page, limit=limit
    )


@router.get("/{email}", response_model=CustomerDetail)
def get_customer(
    email: str,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerDetail:
    try:
        return _detail(service.get_customer(email))
    except DomainException as exc:
        handle_domain_exception(exc)


@router.patch("/{email}", response_model=CustomerDetail)
def update_customer_info(
    email: str,
    payload: CustomerInfoUpdate,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerDetail:
    try:
        customer = service.update_customer_info(email, payload.model_dump(exclude_unset=True))
    except DomainException as exc:
        handle_domain_exception(exc)
    return _detail(customer)


@router.delete("/{email}", response_model=CustomerDeleteResponse)
def delete_customer(
    email: str,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerDeleteResponse:
    try:
        return CustomerDeleteResponse(**service.delete_customer(email))
    except DomainException as exc:
        handle_domain_exception(exc)
