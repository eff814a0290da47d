# backend/app/services/instructor_service.py
"""
Instructor management.

Instructors are referenced by id from the weekly schedule template, from
date overrides and from the slots stored on bookings. An instructor that is
still referenced can only be removed by handing every reference over to a
replacement first.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import SETTING_SCHEDULE_OVERRIDES, SETTING_WEEKLY_AVAILABILITY
from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..models.instructor import Instructor
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"name", "email", "color_scheme", "is_active"}


def _swap(slots: List[Dict[str, Any]], old_id: str, new_id: Optional[str]) -> int:
    """Point slots taught by ``old_id`` at ``new_id`` in place; return how many moved."""
    moved = 0
    for slot in slots:
        if slot.get("instructor_id") == old_id:
            slot["instructor_id"] = new_id
            moved += 1
    return moved


class InstructorService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_instructor_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.setting_repository = RepositoryFactory.create_studio_setting_repository(db)

    def list_instructors(self, *, active_only: bool = False) -> List[Instructor]:
        if active_only:
            return self.repository.list_active()
        return self.repository.list_all()

    def get_instructor(self, instructor_id: str, *, for_update: bool = False) -> Instructor:
        if for_update:
            instructor = self.repository.get_for_update(instructor_id)
        else:
            instructor = self.repository.get_by_id(instructor_id)
        if instructor is None:
            raise NotFoundException(
                f"Instructor {instructor_id} not found", code="instructor_not_found"
            )
        return instructor

    @staticmethod
    def _validate(data: Dict[str, Any]) -> None:
        if "name" in data and not str(data["name"] or "").strip():
            raise ValidationException("Instructor name is required", code="missing_name")

    @BaseService.measure_operation("create_instructor")
    def create_instructor(self, data: Dict[str, Any]) -> Instructor:
        self._validate({**data, "name": data.get("name")})
        fields = {k: v for k, v in data.items() if k in _EDITABLE_FIELDS}
        fields["name"] = str(fields["name"]).strip()
        with self.transaction():
            instructor = self.repository.create(**fields)
        self.log_operation("create_instructor", instructor_id=instructor.id)
        return instructor

    @BaseService.measure_operation("update_instructor")
    def update_instructor(self, instructor_id: str, updates: Dict[str, Any]) -> Instructor:
        self._validate(updates)
        with self.transaction():
            instructor = self.get_instructor(instructor_id, for_update=True)
            for key, value in updates.items():
                if key in _EDITABLE_FIELDS:
                    setattr(instructor, key, value.strip() if key == "name" else value)
            self.repository.flush()
        return instructor

    # Usage

    def _weekly_template(self) -> Dict[str, List[Dict[str, Any]]]:
        stored = self.setting_repository.get_value(SETTING_WEEKLY_AVAILABILITY, {}) or {}
        return {day: [dict(s) for s in slots or []] for day, slots in stored.items()}

    def _overrides(self) -> Dict[str, Dict[str, Any]]:
        stored = self.setting_repository.get_value(SETTING_SCHEDULE_OVERRIDES, {}) or {}
        copied: Dict[str, Dict[str, Any]] = {}
        for day, override in stored.items():
            override = dict(override or {})
            if override.get("slots") is not None:
                override["slots"] = [dict(s) for s in override["slots"]]
            copied[day] = override
        return copied

    def check_usage(self, instructor_id: str) -> Dict[str, Any]:
        """Count the schedule slots and bookings that still reference an instructor."""
        self.get_instructor(instructor_id)
        weekly = sum(
            1
            for slots in self._weekly_template().values()
            for s in slots
            if s.get("instructor_id") == instructor_id
        )
        overrides = sum(
            1
            for override in self._overrides().values()
            for s in override.get("slots") or []
            if s.get("instructor_id") == instructor_id
        )
        bookings = len(self.booking_repository.find_by_instructor(instructor_id))
        return {
            "instructor_id": instructor_id,
            "weekly_slots": weekly,
            "override_slots": overrides,
            "bookings": bookings,
            "has_usage": bool(weekly or overrides or bookings),
        }

    # Removal

    @BaseService.measure_operation("delete_instructor")
    def delete_instructor(self, instructor_id: str) -> None:
        usage = self.check_usage(instructor_id)
        if usage["has_usage"]:
            raise ConflictException(
                "Instructor is still assigned to classes",
                code="instructor_in_use",
                details=usage,
            )
        with self.transaction():
            self.repository.delete_entity(self.get_instructor(instructor_id, for_update=True))
        self.log_operation("delete_instructor", instructor_id=instructor_id)

    @BaseService.measure_operation("reassign_instructor")
    def reassign_and_delete(self, instructor_id: str, replacement_id: str) -> Dict[str, int]:
        """
        Hand every reference over to ``replacement_id``, then delete.

        Covers the weekly template, date overrides and booking slots, all in
        one transaction.
        """
        if instructor_id == replacement_id:
            raise ValidationException(
                "Replacement must be a different instructor", code="invalid_replacement"
            )
        with self.transaction():
            instructor = self.get_instructor(instructor_id, for_update=True)
            replacement = self.get_instructor(replacement_id)

            weekly = self._weekly_template()
            weekly_moved = sum(
                _swap(slots, instructor.id, replacement.id) for slots in weekly.values()
            )
            if weekly_moved:
                self.setting_repository.set_value(SETTING_WEEKLY_AVAILABILITY, weekly)

            overrides = self._overrides()
            override_moved = sum(
                _swap(o["slots"], instructor.id, replacement.id)
                for o in overrides.values()
                if o.get("slots")
            )
            if override_moved:
                self.setting_repository.set_value(SETTING_SCHEDULE_OVERRIDES, overrides)

            bookings = self.booking_repository.find_by_instructor(instructor.id)
            for booking in bookings:
                slots = [dict(s) for s in booking.slots or []]
                _swap(slots, instructor.id, replacement.id)
                booking.slots = slots
            self.booking_repository.flush()

            self.repository.delete_entity(instructor)

        result = {
            "weekly_slots": weekly_moved,
            "override_slots": override_moved,
            "bookings": len(bookings),
        }
        self.log_operation(
            "reassign_instructor",
            instructor_id=instructor_id,
            replacement_id=replacement_id,
            **result,
        )
        return result
