"""Schemas for the instructor roster."""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from ._strict_base import ORMResponseModel, StrictModel, StrictRequestModel


class InstructorCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    color_scheme: Optional[str] = Field(None, max_length=40)
    is_active: bool = True


class InstructorUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    color_scheme: Optional[str] = Field(None, max_length=40)
    is_active: Optional[bool] = None


class InstructorResponse(ORMResponseModel):
    id: str
    name: str
    email: Optional[str] = None
    color_scheme: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None


class InstructorListResponse(StrictModel):
    instructors: List[InstructorResponse]
    total: int


class InstructorUsageResponse(StrictModel):
    instructor_id: str
    weekly_slots: int
    override_slots: int
    bookings: int
    has_usage: bool


class InstructorReassign(StrictRequestModel):
    replacement_id: str = Field(..., min_length=1)


class InstructorReassignResponse(StrictModel):
    weekly_slots: int
    override_slots: int
    bookings: int
