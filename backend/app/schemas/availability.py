"""Schemas for class slots, the admin calendar and schedule settings."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ._strict_base import StrictModel, StrictRequestModel


class TemplateSlot(BaseModel):
    time: str
    instructor_id: Optional[str] = None
    technique: Optional[str] = None


class ScheduleOverride(BaseModel):
    # None closes the day; a list replaces the weekly template
    slots: Optional[List[TemplateSlot]] = None
    capacity: Optional[int] = Field(None, ge=0)


class ScheduleSettings(StrictModel):
    weekly_availability: Dict[str, List[TemplateSlot]]
    schedule_overrides: Dict[str, ScheduleOverride]
    class_capacity: Dict[str, int]


class ScheduleSettingsUpdate(StrictRequestModel):
    weekly_availability: Optional[Dict[str, List[TemplateSlot]]] = None
    schedule_overrides: Optional[Dict[str, ScheduleOverride]] = None
    class_capacity: Optional[Dict[str, int]] = None


class AvailableSlot(StrictModel):
    date: str
    time: str
    available: int
    total: int
    can_book: bool
    instructor: str
    instructor_id: Optional[str] = None
    technique: str


class AvailableSlotsResponse(StrictModel):
    technique: str
    participants: int
    slots: List[AvailableSlot]


class CalendarAttendee(StrictModel):
    booking_id: str
    booking_code: str
    name: str
    email: Optional[str] = None
    participants: int
    is_paid: bool
    attendance: Optional[str] = None


class CalendarSlot(StrictModel):
    date: str
    time: str
    technique: str
    instructor_id: Optional[Any] = None
    total_participants: int
    paid_bookings: int
    total_bookings: int
    capacity: int
    available: int
    attendees: List[CalendarAttendee]


class CalendarResponse(StrictModel):
    slots: List[CalendarSlot]
