"""Schemas for employees and timecards."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from ..core.enums import EmployeeStatus
from ._strict_base import ORMResponseModel, StrictModel, StrictRequestModel


class EmployeeCreate(StrictRequestModel):
    code: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    position: Optional[str] = None


class EmployeeUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    position: Optional[str] = None
    status: Optional[EmployeeStatus] = None


class ClockRequest(StrictRequestModel):
    code: str = Field(..., min_length=1)


class EmployeeResponse(ORMResponseModel):
    id: str
    code: str
    name: str
    email: Optional[str] = None
    position: Optional[str] = None
    status: str


class TimecardResponse(ORMResponseModel):
    id: str
    employee_id: str
    date: date
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    hours_worked: Optional[float] = None


class TimecardStatusResponse(StrictModel):
    employee: EmployeeResponse
    date: date
    timecard: Optional[TimecardResponse] = None
    status: str


class TimecardHistoryResponse(StrictModel):
    timecards: List[TimecardResponse]


class EmployeeDayStatus(StrictModel):
    employee: EmployeeResponse
    timecard: Optional[TimecardResponse] = None
    status: str


class TimecardDashboardResponse(StrictModel):
    date: date
    total_employees: int
    active_today: int
    absent_today: int
    late_today: int
    average_hours_today: float
    employees_status: List[EmployeeDayStatus]


class EmployeeReportResponse(StrictModel):
    employee: EmployeeResponse
    month: int
    year: int
    timecards: List[TimecardResponse]
    total_hours: float
    average_hours: float
    days_present: int
