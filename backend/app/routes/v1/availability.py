# backend/app/routes/v1/availability.py
"""
Class availability routes - API v1

Endpoints:
    GET /slots       → Bookable slots for a technique
    GET /calendar    → Admin calendar of booked slots
    GET /settings    → Weekly template, date overrides and capacities
    PUT /settings    → Replace any of the three schedule documents
"""

from datetime import date
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import get_availability_service
from ...core.enums import Technique
from ...core.exceptions import DomainException
from ...schemas.availability import (
    AvailableSlot,
    AvailableSlotsResponse,
    CalendarResponse,
    CalendarSlot,
    ScheduleSettings,
    ScheduleSettingsUpdate,
)
from ...services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["availability-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/slots", response_model=AvailableSlotsResponse)
def get_available_slots(
    technique: Technique = Query(Technique.POTTERS_WHEEL),
    participants: int = Query(1, ge=1, le=50),
    start_date: Optional[date] = Query(None),
    days_ahead: Optional[int] = Query(None, ge=1, le=180),
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailableSlotsResponse:
    try:
        slots = service.get_available_slots(
            technique.value,
            participants=participants,
            start_date=start_date,
            days_ahead=days_ahead,
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return AvailableSlotsResponse(
        technique=technique.value,
        participants=participants,
        slots=[AvailableSlot(**slot) for slot in slots],
    )


@router.get("/calendar", response_model=CalendarResponse)
def get_calendar(
    start_date: date = Query(...),
    end_date: date = Query(...),
    service: AvailabilityService = Depends(get_availability_service),
) -> CalendarResponse:
    try:
        slots = service.get_calendar_slots(start_date, end_date)
    except DomainException as exc:
        handle_domain_exception(exc)
    return CalendarResponse(slots=[CalendarSlot(**slot) for slot in slots])


@router.get("/settings", response_model=ScheduleSettings)
def get_schedule_settings(
    service: AvailabilityService = Depends(get_availability_service),
) -> ScheduleSettings:
    return ScheduleSettings(**service.get_settings())


@router.put("/settings", response_model=ScheduleSettings)
def update_schedule_settings(
    payload: ScheduleSettingsUpdate,
    service: AvailabilityService = Depends(get_availability_service),
) -> ScheduleSettings:
    data = payload.model_dump(exclude_unset=True)
    try:
        updated = service.update_settings(
            weekly_availability=data.get("weekly_availability"),
            schedule_overrides=data.get("schedule_overrides"),
            class_capacity=data.get("class_capacity"),
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    logger.info("Schedule settings updated: %s", ", ".join(sorted(data)) or "nothing")
    return ScheduleSettings(**updated)
