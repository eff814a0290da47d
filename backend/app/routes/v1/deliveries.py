# backend/app/routes/v1/deliveries.py
"""
Delivery routes - API v1

Endpoints:
    GET /                           → List deliveries (by email / status)
    POST /                          → Schedule a delivery
    POST /maintenance/overdue       → Flag overdue pending deliveries
    PATCH /{delivery_id}            → Partial update
    DELETE /{delivery_id}           → Delete
    POST /{delivery_id}/ready       → Mark ready for pickup
    POST /{delivery_id}/complete    → Mark handed over
"""

import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status

from ...api.dependencies import get_delivery_service, verify_maintenance_secret
from ...core.enums import DeliveryStatus
from ...core.exceptions import DomainException
from ...models.delivery import Delivery
from ...schemas.delivery import (
    DeliveryComplete,
    DeliveryCreate,
    DeliveryListResponse,
    DeliveryReady,
    DeliveryResponse,
    DeliveryTimeline,
    DeliveryUpdate,
    OverdueResponse,
)
from ...services.delivery_service import DeliveryService, delivery_timeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["deliveries-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def _to_response(delivery: Delivery) -> DeliveryResponse:
    response = DeliveryResponse.model_validate(delivery)
    response.timeline = DeliveryTimeline(**delivery_timeline(delivery))
    return response


@router.get("", response_model=DeliveryListResponse)
def list_deliveries(
    email: Optional[str] = Query(None),
    status_filter: Optional[DeliveryStatus] = Query(None, alias="status"),
    service: DeliveryService = Depends(get_delivery_service),
) -> DeliveryListResponse:
    deliveries = service.list_deliveries(
        email=email, status=status_filter.value if status_filter else None
    )
    return DeliveryListResponse(
        deliveries=[_to_response(d) for d in deliveries], total=len(deliveries)
    )


@router.post("", response_model=DeliveryResponse, status_code=status.HTTP_201_CREATED)
def create_delivery(
    payload: DeliveryCreate,
    service: DeliveryService = Depends(get_delivery_service),
) -> DeliveryResponse:
    try:
        delivery = service.create_delivery(payload.model_dump())
    except DomainException as exc:
        handle_domain_exception(exc)
    return _to_response(delivery)


@router.post(
    "/maintenance/overdue",
    response_model=OverdueResponse,
    dependencies=[Depends(verify_maintenance_secret)],
)
def mark_overdue(service: DeliveryService = Depends(get_delivery_service)) -> OverdueResponse:
    return OverdueResponse(updated=service.mark_overdue())


@router.patch("/{delivery_id}", response_model=DeliveryResponse)
def update_delivery(
    delivery_id: str,
    payload: DeliveryUpdate,
    service: DeliveryService = Depends(get_delivery_service),
) -> DeliveryResponse:
    try:
        delivery = service.update_delivery(delivery_id, payload.model_dump(exclude_unset=True))
    except DomainException as exc:
        handle_domain_exception(exc)
    return _to_response(delivery)


@router.delete("/{delivery_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_delivery(
    delivery_id: str,
    service: DeliveryService = Depends(get_delivery_service),
) -> Response:
    try:
        service.delete_delivery(delivery_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{delivery_id}/ready", response_model=DeliveryResponse)
def mark_ready(
    delivery_id: str,
    payload: Optional[DeliveryReady] = Body(None),
    service: DeliveryService = Depends(get_delivery_service),
) -> DeliveryResponse:
    try:
        delivery = service.mark_ready(delivery_id, ready_at=payload.ready_at if payload else None)
    except DomainException as exc:
        handle_domain_exception(exc)
    return _to_response(delivery)


@router.post("/{delivery_id}/complete", response_model=DeliveryResponse)
def mark_completed(
    delivery_id: str,
    payload: Optional[DeliveryComplete] = Body(None),
    service: DeliveryService = Depends(get_delivery_service),
) -> DeliveryResponse:
    try:
        delivery = service.mark_completed(
            delivery_id,
            delivered_at=payload.delivered_at if payload else None,
            notes=payload.notes if payload else None,
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return _to_response(delivery)
