# backend/app/routes/v1/timecards.py
"""
Employee timecard routes - API v1

Endpoints:
    GET /employees                     → List employees
    POST /employees                    → Create employee
    PATCH /employees/{employee_id}     → Update employee (incl. status)
    POST /clock-in                     → Clock in by employee code
    POST /clock-out                    → Clock out by employee code
    GET /status/{code}                 → Today's timecard
    GET /history/{code}                → Month (or last 30 days) of timecards
    GET /dashboard                     → Daily attendance overview
    GET /reports/{employee_id}         → Monthly report for one employee
    GET /export                        → CSV export
"""

from datetime import date
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...api.dependencies import get_timecard_service
from ...core.exceptions import DomainException
from ...core.timezone_utils import studio_today
from ...schemas.timecard import (
    ClockRequest,
    EmployeeCreate,
    EmployeeDayStatus,
    EmployeeReportResponse,
    EmployeeResponse,
    EmployeeUpdate,
    TimecardDashboardResponse,
    TimecardHistoryResponse,
    TimecardResponse,
    TimecardStatusResponse,
)
from ...services.timecard_service import TimecardService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["timecards-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/employees", response_model=List[EmployeeResponse])
def list_employees(
    active_only: bool = Query(False),
    service: TimecardService = Depends(get_timecard_service),
) -> List[EmployeeResponse]:
    return [
        EmployeeResponse.model_validate(e) for e in service.list_employees(active_only=active_only)
    ]


@router.post("/employees", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeeCreate,
    service: TimecardService = Depends(get_timecard_service),
) -> EmployeeResponse:
    try:
        employee = service.create_employee(payload.model_dump())
    except DomainException as exc:
        handle_domain_exception(exc)
    return EmployeeResponse.model_validate(employee)


@router.patch("/employees/{employee_id}", response_model=EmployeeResponse)
def update_employee(
    employee_id: str,
    payload: EmployeeUpdate,
    service: TimecardService = Depends(get_timecard_service),
) -> EmployeeResponse:
    try:
        employee = service.update_employee(employee_id, payload.model_dump(exclude_unset=True))
    except DomainException as exc:
        handle_domain_exception(exc)
    return EmployeeResponse.model_validate(employee)


@router.post("/clock-in", response_model=TimecardResponse, status_code=status.HTTP_201_CREATED)
def clock_in(
    payload: ClockRequest,
    service: TimecardService = Depends(get_timecard_service),
) -> TimecardResponse:
    try:
        return TimecardResponse.model_validate(service.clock_in(payload.code))
    except DomainException as exc:
        handle_domain_exception(exc)


@router.post("/clock-out", response_model=TimecardResponse)
def clock_out(
    payload: ClockRequest,
    service: TimecardService = Depends(get_timecard_service),
) -> TimecardResponse:
    try:
        return TimecardResponse.model_validate(service.clock_out(payload.code))
    except DomainException as exc:
        handle_domain_exception(exc)


@router.get("/status/{code}", response_model=TimecardStatusResponse)
def get_status(
    code: str,
    service: TimecardService = Depends(get_timecard_service),
) -> TimecardStatusResponse:
    try:
        result = service.get_status(code)
    except DomainException as exc:
        handle_domain_exception(exc)
    timecard = result["timecard"]
    return TimecardStatusResponse(
        employee=EmployeeResponse.model_validate(result["employee"]),
        date=result["date"],
        timecard=TimecardResponse.model_validate(timecard) if timecard else None,
        status=result["status"],
    )


@router.get("/history/{code}", response_model=TimecardHistoryResponse)
def get_history(
    code: str,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    service: TimecardService = Depends(get_timecard_service),
) -> TimecardHistoryResponse:
    try:
        timecards = service.get_history(code, month=month, year=year)
    except DomainException as exc:
        handle_domain_exception(exc)
    return TimecardHistoryResponse(
        timecards=[TimecardResponse.model_validate(t) for t in timecards]
    )


@router.get("/dashboard", response_model=TimecardDashboardResponse)
def get_dashboard(
    day: Optional[date] = Query(None, alias="date"),
    service: TimecardService = Depends(get_timecard_service),
) -> TimecardDashboardResponse:
    result = service.get_dashboard(day)
    rows = [
        EmployeeDayStatus(
            employee=EmployeeResponse.model_validate(row["employee"]),
            timecard=TimecardResponse.model_validate(row["timecard"]) if row["timecard"] else None,
            status=row["status"],
        )
        for row in result["employees_status"]
    ]
    return TimecardDashboardResponse(**{**result, "employees_status": rows})


@router.get("/reports/{employee_id}", response_model=EmployeeReportResponse)
def get_employee_report(
    employee_id: str,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
    service: TimecardService = Depends(get_timecard_service),
) -> EmployeeReportResponse:
    try:
        report = service.get_employee_report(employee_id, month, year)
    except DomainException as exc:
        handle_domain_exception(exc)
    return EmployeeReportResponse(
        **{
            **report,
            "employee": EmployeeResponse.model_validate(report["employee"]),
            "timecards": [TimecardResponse.model_validate(t) for t in report["timecards"]],
        }
    )


@router.get("/export")
def export_csv(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    service: TimecardService = Depends(get_timecard_service),
) -> Response:
    content = service.export_csv(month=month, year=year)
    filename = f"asistencia_{studio_today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
