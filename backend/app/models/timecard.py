# backend/app/models/timecard.py
"""Employee and daily timecard models."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import EmployeeStatus
from ..core.timezone_utils import utc_now
from ..database import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    # Stored uppercase; employees clock in by typing it
    code = Column(String(20), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True)
    position = Column(String(120), nullable=True)
    status = Column(String(20), nullable=False, default=EmployeeStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())

    timecards = relationship("Timecard", back_populates="employee", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive')", name="check_employee_status"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE.value

    def __repr__(self) -> str:
        return f"<Employee {self.code} {self.name!r}>"


class Timecard(Base):
    __tablename__ = "timecards"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    employee_id = Column(
        String(26), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Studio-local calendar date
    date = Column(Date, nullable=False, index=True)
    time_in = Column(DateTime(timezone=True), nullable=True)
    time_out = Column(DateTime(timezone=True), nullable=True)
    hours_worked = Column(Numeric(6, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())

    employee = relationship("Employee", back_populates="timecards")

    __table_args__ = (UniqueConstraint("employee_id", "date", name="uq_timecard_employee_date"),)

    def __repr__(self) -> str:
        return f"<Timecard {self.employee_id} {self.date} hours={self.hours_worked}>"
