# backend/app/repositories/timecard_repository.py
"""Employee and timecard queries."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from app.core.enums import EmployeeStatus
from app.models.timecard import Employee, Timecard

from .base_repository import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    def __init__(self, db: Session):
        super().__init__(db, Employee)

    def get_by_code(self, code: str) -> Optional[Employee]:
        return self.find_one_by(code=code.strip().upper())

    def list_employees(self, *, active_only: bool = False) -> List[Employee]:
        query = self.query()
        if active_only:
            query = query.filter(Employee.status == EmployeeStatus.ACTIVE.value)
        return query.order_by(Employee.name.asc()).all()


class TimecardRepository(BaseRepository[Timecard]):
    def __init__(self, db: Session):
        super().__init__(db, Timecard)

    def get_for_day(
        self, employee_id: str, day: date, *, for_update: bool = False
    ) -> Optional[Timecard]:
        query = self.query().filter(Timecard.employee_id == employee_id, Timecard.date == day)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def list_for_employee(self, employee_id: str, start: date, end: date) -> List[Timecard]:
        return (
            self.query()
            .filter(
                Timecard.employee_id == employee_id,
                Timecard.date >= start,
                Timecard.date <= end,
            )
            .order_by(Timecard.date.desc())
            .all()
        )

    def list_for_date(self, day: date) -> List[Timecard]:
        return self.query().filter(Timecard.date == day).all()

    def list_between(self, start: date, end: date) -> List[Timecard]:
        """Timecards with their employee loaded, ordered for export."""
        return (
            self.query()
            .options(joinedload(Timecard.employee))
            .filter(Timecard.date >= start, Timecard.date <= end)
            .order_by(Timecard.date.asc(), Timecard.time_in.asc())
            .all()
        )
