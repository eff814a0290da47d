# backend/app/models/instructor.py
"""Instructor model. Instructors are referenced by id from schedule slots."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import func
import ulid

from ..core.timezone_utils import utc_now
from ..database import Base


class Instructor(Base):
    __tablename__ = "instructors"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=True)
    # tailwind-style palette key for the admin calendar
    color_scheme = Column(String(40), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Instructor {self.id} {self.name!r}>"
