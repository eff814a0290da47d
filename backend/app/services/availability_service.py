# backend/app/services/availability_service.py
"""
Availability Service for the studio platform.

Computes bookable class slots from the studio schedule and the bookings
already holding seats.

Schedule sources, in priority order for a given date:
1. ``schedule_overrides[date]``: ``{"slots": [...], "capacity": n}``; a
   ``null`` slot list closes the studio that day.
2. ``weekly_availability[DayName]``: the recurring template.

Every class lasts ``slot_duration_minutes``. A booking counts against a slot
when its technique shares the slot's capacity pool and its own class window
overlaps the slot's window on the same date.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import (
    DAYS_OF_WEEK,
    INTRO_WHEEL_GROUP_MIN_PARTICIPANTS,
    INTRO_WHEEL_GROUP_SLOTS,
    SETTING_CLASS_CAPACITY,
    SETTING_SCHEDULE_OVERRIDES,
    SETTING_WEEKLY_AVAILABILITY,
)
from ..core.enums import Technique
from ..core.exceptions import CapacityExceededException, ValidationException
from ..core.timezone_utils import (
    parse_clock,
    studio_datetime,
    studio_now,
    studio_today,
    utc_now,
)
from ..models.booking import Booking
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .technique import derive_technique, slot_technique_key

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTOR_NAME = "Instructor"


def normalize_time(value: Any) -> str:
    """'9:5' / '09:05:00' -> '09:05'."""
    clock = parse_clock(str(value))
    return f"{clock.hour:02d}:{clock.minute:02d}"


def time_to_minutes(value: Any) -> int:
    clock = parse_clock(str(value))
    return clock.hour * 60 + clock.minute


def windows_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    return start_a < end_b and start_b < end_a


def booking_technique(booking: Booking) -> str:
    """Effective technique of a stored booking."""
    product = booking.product or {}
    return derive_technique(product.get("name"), booking.technique, product.get("details"))


def slots_require_no_refund(
    slots: Iterable[Mapping[str, Any]],
    now: Optional[datetime] = None,
    horizon_hours: Optional[int] = None,
) -> bool:
    """True when any slot starts within the no-refund horizon."""
    horizon = horizon_hours if horizon_hours is not None else settings.no_refund_horizon_hours
    current = now or utc_now()
    for slot in slots:
        try:
            day = date.fromisoformat(str(slot.get("date"))[:10])
            clock = parse_clock(str(slot.get("time") or "00:00"))
        except ValueError:
            continue
        starts = studio_datetime(day, clock)
        if (starts - current).total_seconds() / 3600 < horizon:
            return True
    return False


class AvailabilityService(BaseService):
    """Slot generation, capacity resolution and calendar aggregation."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.setting_repository = RepositoryFactory.create_studio_setting_repository(db)
        self.instructor_repository = RepositoryFactory.create_instructor_repository(db)

    # Settings

    def get_weekly_availability(self) -> Dict[str, List[Dict[str, Any]]]:
        stored = self.setting_repository.get_value(SETTING_WEEKLY_AVAILABILITY, {}) or {}
        return {day: list(stored.get(day) or []) for day in DAYS_OF_WEEK}

    def get_schedule_overrides(self) -> Dict[str, Dict[str, Any]]:
        return dict(self.setting_repository.get_value(SETTING_SCHEDULE_OVERRIDES, {}) or {})

    def get_class_capacity(self) -> Dict[str, int]:
        capacity = dict(settings.default_class_capacity)
        stored = self.setting_repository.get_value(SETTING_CLASS_CAPACITY, {}) or {}
        capacity.update({k: int(v) for k, v in stored.items() if v})
        return capacity

    def get_settings(self) -> Dict[str, Any]:
        return {
            "weekly_availability": self.get_weekly_availability(),
            "schedule_overrides": self.get_schedule_overrides(),
            "class_capacity": self.get_class_capacity(),
        }

    @BaseService.measure_operation("update_schedule_settings")
    def update_settings(
        self,
        *,
        weekly_availability: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        schedule_overrides: Optional[Dict[str, Dict[str, Any]]] = None,
        class_capacity: Optional[Dict[str, int]] = None,
    ) -> Dict[str, Any]:
        """Replace any of the three schedule documents."""
        with self.transaction():
            if weekly_availability is not None:
                unknown = set(weekly_availability) - set(DAYS_OF_WEEK)
                if unknown:
                    raise ValidationException(
                        f"Unknown day name(s): {', '.join(sorted(unknown))}",
                        code="invalid_day",
                    )
                cleaned = {
                    day: [self._clean_template_slot(s) for s in slots]
                    for day, slots in weekly_availability.items()
                }
                self.setting_repository.set_value(SETTING_WEEKLY_AVAILABILITY, cleaned)
            if schedule_overrides is not None:
                self.setting_repository.set_value(
                    SETTING_SCHEDULE_OVERRIDES, self._clean_overrides(schedule_overrides)
                )
            if class_capacity is not None:
                if any(int(v) < 0 for v in class_capacity.values()):
                    raise ValidationException(
                        "Capacity cannot be negative", code="invalid_capacity"
                    )
                self.setting_repository.set_value(
                    SETTING_CLASS_CAPACITY, {k: int(v) for k, v in class_capacity.items()}
                )
        self.log_operation("update_schedule_settings")
        return self.get_settings()

    @staticmethod
    def _clean_template_slot(slot: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            slot_time = normalize_time(slot["time"])
        except (KeyError, ValueError):
            raise ValidationException(f"Invalid schedule slot: {dict(slot)}", code="invalid_slot")
        return {
            "time": slot_time,
            "instructor_id": slot.get("instructor_id"),
            "technique": slot_technique_key(slot.get("technique")),
        }

    def _clean_overrides(self, overrides: Mapping[str, Any]) -> Dict[str, Any]:
        cleaned: Dict[str, Any] = {}
        for raw_date, override in overrides.items():
            try:
                key = date.fromisoformat(raw_date).isoformat()
            except ValueError:
                raise ValidationException(f"Invalid override date: {raw_date}", code="invalid_date")
            override = override or {}
            slots = override.get("slots")
            cleaned[key] = {
                "slots": None if slots is None else [self._clean_template_slot(s) for s in slots],
                "capacity": override.get("capacity"),
            }
        return cleaned

    # Capacity

    def resolve_capacity(
        self,
        date_str: str,
        technique: Optional[str],
        *,
        capacity: Optional[Mapping[str, int]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> int:
        """Override capacity for the date if positive, else the technique pool's capacity."""
        overrides = self.get_schedule_overrides() if overrides is None else overrides
        capacity = self.get_class_capacity() if capacity is None else capacity
        override_cap = (overrides.get(date_str) or {}).get("capacity")
        if isinstance(override_cap, int) and override_cap > 0:
            return override_cap
        value = capacity.get(technique or "") or capacity.get(slot_technique_key(technique))
        return int(value) if value else settings.fallback_class_capacity

    def booked_participants(
        self, bookings: Iterable[Booking], date_str: str, time_str: str, technique: str
    ) -> int:
        """Participants of bookings in the same pool whose class overlaps this one."""
        duration = settings.slot_duration_minutes
        start = time_to_minutes(time_str)
        pool = slot_technique_key(technique)
        total = 0
        for booking in bookings:
            if slot_technique_key(booking_technique(booking)) != pool:
                continue
            for slot in booking.slots or []:
                if str(slot.get("date")) != date_str or not slot.get("time"):
                    continue
                other = time_to_minutes(slot["time"])
                if windows_overlap(start, start + duration, other, other + duration):
                    total += booking.participants or 1
                    break
        return total

    def _slots_for_day(
        self,
        day: date,
        weekly: Mapping[str, List[Dict[str, Any]]],
        overrides: Mapping[str, Any],
    ) -> List[Dict[str, Any]]:
        date_str = day.isoformat()
        if date_str in overrides:
            slots = (overrides[date_str] or {}).get("slots")
            # None closes the day
            return list(slots) if slots is not None else []
        return list(weekly.get(DAYS_OF_WEEK[day.weekday()]) or [])

    @BaseService.measure_operation("get_available_slots")
    def get_available_slots(
        self,
        technique: str,
        participants: int = 1,
        start_date: Optional[date] = None,
        days_ahead: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Every scheduled slot for the technique's pool, with remaining seats.

        Wheel classes are fixed sessions, so an empty wheel slot is treated as
        already holding one student; this keeps groups out of the in-between
        start times around a running class.
        """
        if participants < 1:
            raise ValidationException(
                "participants must be at least 1", code="invalid_participants"
            )
        start = start_date or studio_today()
        days = days_ahead or settings.availability_days_ahead
        end = start + timedelta(days=days)

        weekly = self.get_weekly_availability()
        overrides = self.get_schedule_overrides()
        capacity = self.get_class_capacity()
        bookings = self.booking_repository.get_seat_holding_bookings(
            start - timedelta(days=1), end + timedelta(days=1)
        )
        pool = slot_technique_key(technique)
        is_wheel = technique == Technique.POTTERS_WHEEL.value

        candidates: List[Tuple[str, str, Optional[str]]] = []
        for offset in range(days):
            day = start + timedelta(days=offset)
            date_str = day.isoformat()
            if is_wheel and participants >= INTRO_WHEEL_GROUP_MIN_PARTICIPANTS:
                for weekday, intro_time in INTRO_WHEEL_GROUP_SLOTS:
                    if day.weekday() == weekday:
                        candidates.append((date_str, intro_time, None))
            for slot in self._slots_for_day(day, weekly, overrides):
                if slot_technique_key(slot.get("technique")) != pool:
                    continue
                candidates.append(
                    (date_str, normalize_time(slot["time"]), slot.get("instructor_id"))
                )

        # Slots that already started today cannot be booked
        now_local = studio_now()
        today_str = now_local.date().isoformat()
        minutes_now = now_local.hour * 60 + now_local.minute
        candidates = [
            c for c in candidates if c[0] != today_str or time_to_minutes(c[1]) > minutes_now
        ]

        names = self.instructor_repository.get_names(c[2] for c in candidates if c[2])
        results: List[Dict[str, Any]] = []
        for date_str, slot_time, instructor_id in candidates:
            booked = self.booked_participants(bookings, date_str, slot_time, technique)
            if is_wheel and booked == 0:
                booked = 1
            total = self.resolve_capacity(
                date_str, technique, capacity=capacity, overrides=overrides
            )
            available = total - booked
            results.append(
                {
                    "date": date_str,
                    "time": slot_time,
                    "available": max(0, available),
                    "total": total,
                    "can_book": available >= participants,
                    "instructor": names.get(instructor_id or "", DEFAULT_INSTRUCTOR_NAME),
                    "instructor_id": instructor_id,
                    "technique": technique,
                }
            )
        self.logger.debug(
            "Generated %d slots for %s (%d bookable)",
            len(results),
            technique,
            sum(1 for r in results if r["can_book"]),
        )
        return results

    def check_slot_capacity(
        self,
        slot: Mapping[str, Any],
        technique: str,
        participants: int,
        *,
        exclude_booking_id: Optional[str] = None,
    ) -> int:
        """Seats left after adding ``participants``; raises when the slot is full."""
        date_str = str(slot.get("date"))
        slot_time = normalize_time(slot.get("time"))
        day = date.fromisoformat(date_str)
        bookings = self.booking_repository.get_seat_holding_bookings(
            day, day, exclude_ids=[exclude_booking_id] if exclude_booking_id else []
        )
        booked = self.booked_participants(bookings, date_str, slot_time, technique)
        total = self.resolve_capacity(date_str, technique)
        available = total - booked
        if available < participants:
            raise CapacityExceededException(date_str, slot_time, max(0, available), participants)
        return available - participants

    @BaseService.measure_operation("get_calendar_slots")
    def get_calendar_slots(self, start_date: date, end_date: date) -> List[Dict[str, Any]]:
        """
        Group bookings into calendar slots for the admin schedule.

        One entry per (date, time, capacity pool) with its attendees, seat
        usage and how many of the bookings are paid.
        """
        if end_date < start_date:
            raise ValidationException(
                "end_date must not be before start_date", code="invalid_range"
            )
        bookings = self.booking_repository.get_seat_holding_bookings(start_date, end_date)
        capacity = self.get_class_capacity()
        overrides = self.get_schedule_overrides()
        start_str, end_str = start_date.isoformat(), end_date.isoformat()

        groups: Dict[Tuple[str, str, str], Dict[str, Any]] = {}
        attendees: Dict[Tuple[str, str, str], List[Dict[str, Any]]] = defaultdict(list)
        for booking in bookings:
            pool = slot_technique_key(booking_technique(booking))
            user = booking.user_info or {}
            for slot in booking.slots or []:
                date_str = str(slot.get("date"))
                if not (start_str <= date_str <= end_str) or not slot.get("time"):
                    continue
                key = (date_str, normalize_time(slot["time"]), pool)
                group = groups.setdefault(
                    key,
                    {
                        "date": key[0],
                        "time": key[1],
                        "technique": pool,
                        "instructor_id": slot.get("instructor_id"),
                        "total_participants": 0,
                        "paid_bookings": 0,
                        "total_bookings": 0,
                    },
                )
                group["total_participants"] += booking.participants or 1
                group["total_bookings"] += 1
                if booking.is_paid:
                    group["paid_bookings"] += 1
                attendees[key].append(
                    {
                        "booking_id": booking.id,
                        "booking_code": booking.booking_code,
                        "name": " ".join(
                            p for p in (user.get("first_name"), user.get("last_name")) if p
                        ),
                        "email": user.get("email"),
                        "participants": booking.participants or 1,
                        "is_paid": bool(booking.is_paid),
                        "attendance": (booking.attendance or {}).get(f"{key[0]}_{key[1]}"),
                    }
                )

        results = []
        for key in sorted(groups):
            group = groups[key]
            total = self.resolve_capacity(
                key[0], key[2], capacity=capacity, overrides=overrides
            )
            group["capacity"] = total
            group["available"] = max(0, total - group["total_participants"])
            group["attendees"] = attendees[key]
            results.append(group)
        return results
