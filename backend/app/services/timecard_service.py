# backend/app/services/timecard_service.py
"""
Timecard Service for the studio platform.

Employees clock in and out with their personal code. One timecard exists
per employee and studio-local calendar day; the admin side reads daily
dashboards, monthly reports and a CSV export.
"""

from __future__ import annotations

import csv
from datetime import date, datetime, timedelta
from decimal import Decimal
import io
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import TIMECARD_CSV_HEADER
from ..core.enums import EmployeeStatus
from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..core.timezone_utils import parse_clock, studio_today, to_studio_time, utc_now
from ..models.timecard import Employee, Timecard
from ..repositories.factory import RepositoryFactory
from ..utils.time_helpers import days_ago, hours_between, month_bounds, time_to_string
from .base import BaseService

logger = logging.getLogger(__name__)

HISTORY_DEFAULT_DAYS = 30

_EMPLOYEE_FIELDS = {"name", "email", "position"}


def timecard_state(timecard: Optional[Timecard]) -> str:
    """``absent`` without a clock-in, ``in_progress`` until clock-out, then ``present``."""
    if timecard is None or timecard.time_in is None:
        return "absent"
    return "present" if timecard.time_out is not None else "in_progress"


def _hours(value: Any) -> float:
    return float(value) if value is not None else 0.0


def _format_hours(value: Any) -> str:
    return f"{float(value):.2f}" if value is not None else ""


class TimecardService(BaseService):
    """Service layer for employee attendance."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.employee_repository = RepositoryFactory.create_employee_repository(db)
        self.repository = RepositoryFactory.create_timecard_repository(db)

    # Employees

    def list_employees(self, *, active_only: bool = False) -> List[Employee]:
        return self.employee_repository.list_employees(active_only=active_only)

    def get_employee(self, employee_id: str) -> Employee:
        employee = self.employee_repository.get_by_id(employee_id)
        if employee is None:
            raise NotFoundException("Employee not found", code="employee_not_found")
        return employee

    def _get_active_by_code(self, code: str) -> Employee:
        employee = self.employee_repository.get_by_code(code or "")
        if employee is None or not employee.is_active:
            raise NotFoundException("Employee not found or inactive", code="employee_not_found")
        return employee

    def create_employee(self, data: Dict[str, Any]) -> Employee:
        code = (data.get("code") or "").strip().upper()
        name = (data.get("name") or "").strip()
        if not code or not name:
            raise ValidationException("Employee code and name are required", code="missing_fields")
        if self.employee_repository.get_by_code(code) is not None:
            raise ConflictException(f"Employee code {code} already exists", code="duplicate_code")
        with self.transaction():
            employee = self.employee_repository.create(
                code=code,
                name=name,
                email=data.get("email"),
                position=data.get("position"),
                status=EmployeeStatus.ACTIVE.value,
            )
        self.log_operation("create_employee", employee_id=employee.id, code=code)
        return employee

    def update_employee(self, employee_id: str, updates: Dict[str, Any]) -> Employee:
        with self.transaction():
            employee = self.get_employee(employee_id)
            for field, value in updates.items():
                if field in _EMPLOYEE_FIELDS and value is not None:
                    setattr(employee, field, value)
            if updates.get("status") is not None:
                self._apply_status(employee, updates["status"])
            self.employee_repository.flush()
        return employee

    def set_employee_status(self, employee_id: str, status: str) -> Employee:
        with self.transaction():
            employee = self.get_employee(employee_id)
            self._apply_status(employee, status)
            self.employee_repository.flush()
        self.log_operation("set_employee_status", employee_id=employee_id, status=status)
        return employee

    @staticmethod
    def _apply_status(employee: Employee, status: str) -> None:
        if status not in {s.value for s in EmployeeStatus}:
            raise ValidationException(f"Invalid employee status: {status}", code="invalid_status")
        employee.status = status

    # Clock

    @BaseService.measure_operation("clock_in")
    def clock_in(self, code: str, now: Optional[datetime] = None) -> Timecard:
        employee = self._get_active_by_code(code)
        current = now or utc_now()
        today = to_studio_time(current).date()
        with self.transaction():
            if self.repository.get_for_day(employee.id, today, for_update=True) is not None:
                raise ValidationException("Already clocked in today", code="already_clocked_in")
            timecard = self.repository.create(employee_id=employee.id, date=today, time_in=current)
        self.log_operation("clock_in", employee=employee.code, date=today.isoformat())
        return timecard

    @BaseService.measure_operation("clock_out")
    def clock_out(self, code: str, now: Optional[datetime] = None) -> Timecard:
        employee = self._get_active_by_code(code)
        current = now or utc_now()
        today = to_studio_time(current).date()
        with self.transaction():
            timecard = self.repository.get_for_day(employee.id, today, for_update=True)
            if timecard is None or timecard.time_in is None:
                raise ValidationException("No clock-in recorded today", code="not_clocked_in")
            if timecard.time_out is not None:
                raise ValidationException("Already clocked out today", code="already_clocked_out")
            timecard.time_out = current
            started = to_studio_time(timecard.time_in)
            timecard.hours_worked = Decimal(str(hours_between(started, current)))
            self.repository.flush()
        self.log_operation(
            "clock_out", employee=employee.code, hours=float(timecard.hours_worked)
        )
        return timecard

    def get_status(self, code: str) -> Dict[str, Any]:
        employee = self._get_active_by_code(code)
        today = studio_today()
        timecard = self.repository.get_for_day(employee.id, today)
        return {
            "employee": employee,
            "date": today,
            "timecard": timecard,
            "status": timecard_state(timecard),
        }

    def get_history(
        self, code: str, month: Optional[int] = None, year: Optional[int] = None
    ) -> List[Timecard]:
        """A month of timecards, or the last 30 days when no month is given."""
        employee = self._get_active_by_code(code)
        if month and year:
            start, end = month_bounds(year, month)
        else:
            end = studio_today()
            start = days_ago(end, HISTORY_DEFAULT_DAYS)
        return self.repository.list_for_employee(employee.id, start, end)

    # Reports

    def _is_late(self, timecard: Timecard) -> bool:
        if timecard.time_in is None:
            return False
        threshold = parse_clock(settings.late_arrival_time)
        return to_studio_time(timecard.time_in).time().replace(second=0, microsecond=0) > threshold

    @BaseService.measure_operation("timecard_dashboard")
    def get_dashboard(self, day: Optional[date] = None) -> Dict[str, Any]:
        target = day or studio_today()
        employees = self.employee_repository.list_employees(active_only=True)
        cards = {t.employee_id: t for t in self.repository.list_for_date(target)}

        active_cards = [cards[e.id] for e in employees if e.id in cards]
        present = sum(1 for t in active_cards if t.time_in is not None)
        finished = [float(t.hours_worked) for t in active_cards if t.hours_worked is not None]
        return {
            "date": target,
            "total_employees": len(employees),
            "active_today": present,
            "absent_today": len(employees) - present,
            "late_today": sum(1 for t in active_cards if self._is_late(t)),
            "average_hours_today": round(sum(finished) / len(finished), 2) if finished else 0.0,
            "employees_status": [
                {
                    "employee": employee,
                    "timecard": cards.get(employee.id),
                    "status": timecard_state(cards.get(employee.id)),
                }
                for employee in employees
            ],
        }

    def get_employee_report(self, employee_id: str, month: int, year: int) -> Dict[str, Any]:
        employee = self.get_employee(employee_id)
        try:
            start, end = month_bounds(year, month)
        except ValueError as exc:
            raise ValidationException(str(exc), code="invalid_month")
        timecards = self.repository.list_for_employee(employee.id, start, end)
        total = round(sum(_hours(t.hours_worked) for t in timecards), 2)
        return {
            "employee": employee,
            "month": month,
            "year": year,
            "timecards": timecards,
            "total_hours": total,
            "average_hours": round(total / len(timecards), 2) if timecards else 0.0,
            "days_present": sum(1 for t in timecards if t.time_in is not None),
        }

    def export_csv(self, month: Optional[int] = None, year: Optional[int] = None) -> str:
        """Attendance of active employees as CSV, one row per timecard."""
        if month and year:
            start, end = month_bounds(year, month)
        else:
            end = studio_today()
            start = end - timedelta(days=HISTORY_DEFAULT_DAYS)

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(TIMECARD_CSV_HEADER)
        for timecard in self.repository.list_between(start, end):
            employee = timecard.employee
            if employee is None or not employee.is_active:
                continue
            writer.writerow(
                [
                    employee.code,
                    employee.name,
                    employee.position or "",
                    timecard.date.isoformat(),
                    time_to_string(to_studio_time(timecard.time_in).time())
                    if timecard.time_in
                    else "",
                    time_to_string(to_studio_time(timecard.time_out).time())
                    if timecard.time_out
                    else "",
                    _format_hours(timecard.hours_worked),
                ]
            )
        return buffer.getvalue()
