# backend/app/repositories/booking_repository.py
"""
Booking Repository for the studio platform.

Slot data lives in a JSON column. Date filtering on slots happens in Python;
on Postgres a jsonpath predicate narrows the rows first.
"""

from __future__ import annotations

from datetime import date, datetime
import json
import logging
from typing import Any, Iterable, List, Optional

from sqlalchemy import cast, func
from sqlalchemy.dialects.postgresql import JSONB, JSONPATH
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.enums import BookingStatus
from app.core.exceptions import RepositoryException
from app.models.booking import Booking

from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


def _slot_in_range(slot: dict, start: Optional[date], end: Optional[date]) -> bool:
    raw = slot.get("date")
    if not raw:
        return False
    try:
        day = date.fromisoformat(str(raw)[:10])
    except ValueError:
        return False
    if start and day < start:
        return False
    if end and day > end:
        return False
    return True


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking queries."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def get_by_code(self, booking_code: str) -> Optional[Booking]:
        return self.find_one_by(booking_code=booking_code)

    def code_exists(self, booking_code: str) -> bool:
        return self.exists(booking_code=booking_code)

    def _slot_range_clause(self, start: Optional[date], end: Optional[date]) -> Any:
        """
        Postgres-only prefilter: some slot date inside [start, end].

        ISO dates compare correctly as strings, so a jsonpath over
        ``slots[*].date`` narrows the scan; the Python check stays authoritative.
        """
        conditions, variables = [], {}
        if start is not None:
            conditions.append("@.date >= $start")
            variables["start"] = start.isoformat()
        if end is not None:
            conditions.append("@.date <= $end")
            variables["end"] = end.isoformat()
        path = "$[*] ? (" + " && ".join(conditions) + ")"
        return func.jsonb_path_exists(
            Booking.slots, cast(path, JSONPATH), cast(json.dumps(variables), JSONB)
        )

    def list_bookings(
        self,
        *,
        status: Optional[str] = None,
        email: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = 500,
    ) -> List[Booking]:
        """
        Newest bookings first. With a date range every booking is considered
        regardless of when it was created; the limit applies after filtering.
        """
        ranged = start_date is not None or end_date is not None
        try:
            query = self.query()
            if status:
                query = query.filter(Booking.status == status)
            if email:
                query = query.filter(Booking.customer_email == email.strip().lower())
            if ranged and self.db.get_bind().dialect.name == "postgresql":
                query = query.filter(self._slot_range_clause(start_date, end_date))
            query = query.order_by(Booking.created_at.desc(), Booking.id.desc())
            if limit and not ranged:
                query = query.limit(limit)
            rows = query.all()
        except SQLAlchemyError as exc:
            self.logger.error("Failed to list bookings: %s", str(exc))
            raise RepositoryException("Failed to list bookings") from exc
        if not ranged:
            return rows
        matching = [
            b for b in rows if any(_slot_in_range(s, start_date, end_date) for s in b.slots or [])
        ]
        return matching[:limit] if limit else matching

    def get_seat_holding_bookings(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        exclude_ids: Iterable[str] = (),
    ) -> List[Booking]:
        """Bookings that occupy seats: everything not expired."""
        try:
            query = self.query().filter(Booking.status != BookingStatus.EXPIRED.value)
            excluded = [i for i in exclude_ids if i]
            if excluded:
                query = query.filter(Booking.id.notin_(excluded))
            rows = query.all()
        except SQLAlchemyError as exc:
            self.logger.error("Failed to load seat-holding bookings: %s", str(exc))
            raise RepositoryException("Failed to load bookings") from exc
        if start_date is None and end_date is None:
            return rows
        return [
            b for b in rows if any(_slot_in_range(s, start_date, end_date) for s in b.slots or [])
        ]

    def find_by_instructor(self, instructor_id: str) -> List[Booking]:
        """Bookings with at least one slot taught by ``instructor_id``."""
        try:
            query = self.query()
            if self.db.get_bind().dialect.name == "postgresql":
                query = query.filter(
                    func.jsonb_path_exists(
                        Booking.slots,
                        cast("$[*] ? (@.instructor_id == $id)", JSONPATH),
                        cast(json.dumps({"id": instructor_id}), JSONB),
                    )
                )
            rows = query.order_by(Booking.created_at.asc(), Booking.id.asc()).all()
        except SQLAlchemyError as exc:
            self.logger.error(
                "Failed to find bookings for instructor %s: %s", instructor_id, str(exc)
            )
            raise RepositoryException("Failed to load bookings") from exc
        return [
            b for b in rows if any(s.get("instructor_id") == instructor_id for s in b.slots or [])
        ]

    def find_active_by_email(self, email: str) -> List[Booking]:
        return (
            self.query()
            .filter(
                Booking.customer_email == email.strip().lower(),
                Booking.status != BookingStatus.EXPIRED.value,
            )
            .all()
        )

    def get_expirable(self, now: datetime) -> List[Booking]:
        """Unpaid pre-reservations whose hold on seats has run out."""
        try:
            return (
                self.query()
                .filter(
                    Booking.status == BookingStatus.ACTIVE.value,
                    Booking.is_paid.is_(False),
                    Booking.expires_at.isnot(None),
                    Booking.expires_at <= now,
                )
                .with_for_update()
                .all()
            )
        except SQLAlchemyError as exc:
            self.logger.error("Failed to load expirable bookings: %s", str(exc))
            raise RepositoryException("Failed to load expirable bookings") from exc
