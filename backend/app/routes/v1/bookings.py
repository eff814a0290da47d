# backend/app/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to BookingService.

Endpoints:
    GET /                                  → List bookings with filters
    POST /                                 → Checkout (idempotent by booking_code)
    DELETE /range                          → Drop every slot in a date range
    POST /maintenance/expire               → Expire unpaid pre-reservations
    GET /maintenance/techniques            → Technique inconsistency report
    POST /maintenance/techniques           → Fix inconsistent techniques
    GET /{booking_id}                      → Booking detail
    DELETE /{booking_id}                   → Delete booking
    POST /{booking_id}/payments            → Add manual payment
    PATCH /{booking_id}/payments/{id}      → Edit a payment
    DELETE /{booking_id}/payments/{id}     → Remove a payment
    POST /{booking_id}/unpaid              → Clear all payments
    POST /{booking_id}/reschedule          → Move one slot
    POST /{booking_id}/slots/remove        → Drop one slot
    POST /{booking_id}/attendance          → Record attendance for a slot
"""

from datetime import date
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status

from ...api.dependencies import get_booking_service, verify_maintenance_secret
from ...core.enums import BookingStatus
from ...core.exceptions import DomainException
from ...schemas.booking import (
    AttendanceUpdate,
    BookingCreate,
    BookingCreateResponse,
    BookingListResponse,
    BookingResponse,
    ExpireResponse,
    PaymentCreate,
    PaymentDelete,
    PaymentUpdate,
    RangeDeleteResponse,
    RemoveSlotRequest,
    RemoveSlotResponse,
    RescheduleRequest,
    TechniqueIssue,
    TechniqueReportResponse,
)
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=BookingListResponse)
def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    email: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    bookings = service.list_bookings(
        status=status_filter.value if status_filter else None,
        email=email,
        start_date=start_date,
        end_date=end_date,
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings], total=len(bookings)
    )


@router.post("", response_model=BookingCreateResponse)
def create_booking(
    payload: BookingCreate,
    response: Response,
    service: BookingService = Depends(get_booking_service),
) -> BookingCreateResponse:
    """
    Create a booking.

    Returns 201 for a new booking and 200 when an existing booking is
    returned (same booking_code, or the customer already holds the slot).
    """
    try:
        booking, created = service.create_booking(payload.model_dump(mode="python"))
    except DomainException as exc:
        handle_domain_exception(exc)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return BookingCreateResponse(booking=BookingResponse.model_validate(booking), created=created)


@router.delete("/range", response_model=RangeDeleteResponse)
def delete_bookings_in_range(
    start_date: date = Query(...),
    end_date: date = Query(...),
    service: BookingService = Depends(get_booking_service),
) -> RangeDeleteResponse:
    try:
        result = service.delete_bookings_in_range(start_date, end_date)
    except DomainException as exc:
        handle_domain_exception(exc)
    return RangeDeleteResponse(**result)


@router.post(
    "/maintenance/expire",
    response_model=ExpireResponse,
    dependencies=[Depends(verify_maintenance_secret)],
)
def expire_prebookings(service: BookingService = Depends(get_booking_service)) -> ExpireResponse:
    return ExpireResponse(expired=service.expire_prebookings())


@router.get(
    "/maintenance/techniques",
    response_model=TechniqueReportResponse,
    dependencies=[Depends(verify_maintenance_secret)],
)
def technique_report(
    service: BookingService = Depends(get_booking_service),
) -> TechniqueReportResponse:
    issues = service.find_technique_inconsistencies()
    return TechniqueReportResponse(issues=[TechniqueIssue(**i) for i in issues])


@router.post(
    "/maintenance/techniques",
    response_model=TechniqueReportResponse,
    dependencies=[Depends(verify_maintenance_secret)],
)
def fix_techniques(
    service: BookingService = Depends(get_booking_service),
) -> TechniqueReportResponse:
    issues = service.reconcile_techniques()
    return TechniqueReportResponse(issues=[TechniqueIssue(**i) for i in issues], fixed=True)


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        return BookingResponse.model_validate(service.get_booking(booking_id))
    except DomainException as exc:
        handle_domain_exception(exc)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
) -> Response:
    try:
        service.delete_booking(booking_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{booking_id}/payments",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_payment(
    booking_id: str,
    payload: PaymentCreate,
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = service.add_payment(booking_id, payload.model_dump())
    except DomainException as exc:
        handle_domain_exception(exc)
    return BookingResponse.model_validate(booking)


@router.patch("/{booking_id}/payments/{payment_id}", response_model=BookingResponse)
def update_payment(
    booking_id: str,
    payment_id: str,
    payload: PaymentUpdate,
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = service.update_payment(
            booking_id, payment_id, payload.model_dump(exclude_unset=True)
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return BookingResponse.model_validate(booking)


@router.delete("/{booking_id}/payments/{payment_id}", response_model=BookingResponse)
def delete_payment(
    booking_id: str,
    payment_id: str,
    payload: Optional[PaymentDelete] = Body(None),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = service.delete_payment(
            booking_id, payment_id, reason=payload.reason if payload else None
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/unpaid", response_model=BookingResponse)
def mark_unpaid(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = service.mark_unpaid(booking_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/reschedule", response_model=BookingResponse)
def reschedule_slot(
    booking_id: str,
    payload: RescheduleRequest,
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = service.reschedule_slot(
            booking_id,
            payload.old_slot.model_dump(),
            payload.new_slot.model_dump(),
            admin_override=payload.admin_override,
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/slots/remove", response_model=RemoveSlotResponse)
def remove_slot(
    booking_id: str,
    payload: RemoveSlotRequest,
    service: BookingService = Depends(get_booking_service),
) -> RemoveSlotResponse:
    try:
        result = service.remove_slot(booking_id, payload.slot.model_dump())
    except DomainException as exc:
        handle_domain_exception(exc)
    booking = result["booking"]
    return RemoveSlotResponse(
        deleted=result["deleted"],
        booking=BookingResponse.model_validate(booking) if booking is not None else None,
    )


@router.post("/{booking_id}/attendance", response_model=BookingResponse)
def update_attendance(
    booking_id: str,
    payload: AttendanceUpdate,
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = service.update_attendance(
            booking_id, payload.date.isoformat(), payload.time, payload.status
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return BookingResponse.model_validate(booking)
