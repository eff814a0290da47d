# backend/app/routes/v1/instructors.py
"""
Instructor routes - API v1

Endpoints:
    GET /                             → List instructors (all, or active only)
    POST /                            → Create instructor
    PATCH /{instructor_id}            → Partial update
    GET /{instructor_id}/usage        → Schedule slots and bookings still assigned
    DELETE /{instructor_id}           → Delete an unused instructor
    POST /{instructor_id}/reassign    → Move assignments to another instructor, then delete
"""

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...api.dependencies import get_instructor_service
from ...core.exceptions import DomainException
from ...schemas.instructor import (
    InstructorCreate,
    InstructorListResponse,
    InstructorReassign,
    InstructorReassignResponse,
    InstructorResponse,
    InstructorUpdate,
    InstructorUsageResponse,
)
from ...services.instructor_service import InstructorService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["instructors-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=InstructorListResponse)
def list_instructors(
    active_only: bool = Query(False),
    service: InstructorService = Depends(get_instructor_service),
) -> InstructorListResponse:
    instructors = service.list_instructors(active_only=active_only)
    return InstructorListResponse(
        instructors=[InstructorResponse.model_validate(i) for i in instructors],
        total=len(instructors),
    )


@router.post("", response_model=InstructorResponse, status_code=status.HTTP_201_CREATED)
def create_instructor(
    payload: InstructorCreate,
    service: InstructorService = Depends(get_instructor_service),
) -> InstructorResponse:
    try:
        instructor = service.create_instructor(payload.model_dump())
    except DomainException as exc:
        handle_domain_exception(exc)
    return InstructorResponse.model_validate(instructor)


@router.patch("/{instructor_id}", response_model=InstructorResponse)
def update_instructor(
    instructor_id: str,
    payload: InstructorUpdate,
    service: InstructorService = Depends(get_instructor_service),
) -> InstructorResponse:
    try:
        instructor = service.update_instructor(
            instructor_id, payload.model_dump(exclude_unset=True)
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return InstructorResponse.model_validate(instructor)


@router.get("/{instructor_id}/usage", response_model=InstructorUsageResponse)
def get_usage(
    instructor_id: str,
    service: InstructorService = Depends(get_instructor_service),
) -> InstructorUsageResponse:
    try:
        return InstructorUsageResponse(**service.check_usage(instructor_id))
    except DomainException as exc:
        handle_domain_exception(exc)


@router.delete("/{instructor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_instructor(
    instructor_id: str,
    service: InstructorService = Depends(get_instructor_service),
) -> Response:
    try:
        service.delete_instructor(instructor_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{instructor_id}/reassign", response_model=InstructorReassignResponse)
def reassign_and_delete(
    instructor_id: str,
    payload: InstructorReassign,
    service: InstructorService = Depends(get_instructor_service),
) -> InstructorReassignResponse:
    try:
        result = service.reassign_and_delete(instructor_id, payload.replacement_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return InstructorReassignResponse(**result)
