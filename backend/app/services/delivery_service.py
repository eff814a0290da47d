# backend/app/services/delivery_service.py
"""
Delivery Service for the studio platform.

Tracks finished pieces from scheduling through "ready for pickup" to the
hand-over, plus the daily sweep that flags overdue pieces.
"""

from __future__ import annotations

from datetime import date, datetime
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import DeliveryStatus
from ..core.exceptions import NotFoundException, ValidationException
from ..core.timezone_utils import studio_today, utc_now
from ..models.delivery import Delivery
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..utils.delivery_dates import (
    days_until,
    is_critically_urgent,
    ready_expiration,
    ready_status,
    scheduled_status,
)
from ..utils.time_helpers import as_date
from .base import BaseService

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {
    "customer_email",
    "customer_name",
    "description",
    "scheduled_date",
    "status",
    "notes",
    "photos",
}


def delivery_timeline(delivery: Delivery, today: Optional[date] = None) -> Dict[str, Any]:
    """Countdown labels shown next to a delivery in the admin list."""
    days = days_until(delivery.scheduled_date, today)
    timeline: Dict[str, Any] = {
        "days_until_scheduled": days,
        "scheduled_status": scheduled_status(days),
        "ready_expires_at": None,
        "ready_status": None,
        "critically_urgent": is_critically_urgent(delivery, today),
    }
    if delivery.ready_at is not None:
        expires = ready_expiration(delivery.ready_at)
        timeline["ready_expires_at"] = expires
        timeline["ready_status"] = ready_status(days_until(expires, today))
    return timeline


class DeliveryService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_delivery_repository(db)

    def get_delivery(self, delivery_id: str) -> Delivery:
        delivery = self.repository.get_by_id(delivery_id)
        if delivery is None:
            raise NotFoundException("Delivery not found", code="delivery_not_found")
        return delivery

    def list_deliveries(
        self, email: Optional[str] = None, status: Optional[str] = None
    ) -> List[Delivery]:
        return self.repository.list_deliveries(email=email, status=status)

    @BaseService.measure_operation("create_delivery")
    def create_delivery(self, data: Dict[str, Any]) -> Delivery:
        email = (data.get("customer_email") or "").strip().lower()
        description = (data.get("description") or "").strip()
        if not email or not description or not data.get("scheduled_date"):
            raise ValidationException(
                "customer_email, description and scheduled_date are required",
                code="missing_fields",
            )
        with self.transaction():
            delivery = self.repository.create(
                customer_email=email,
                customer_name=data.get("customer_name"),
                description=description,
                scheduled_date=as_date(data["scheduled_date"]),
                status=DeliveryStatus.PENDING.value,
                notes=data.get("notes"),
                photos=list(data.get("photos") or []),
            )
        self.log_operation("create_delivery", delivery_id=delivery.id, email=email)
        return delivery

    def update_delivery(self, delivery_id: str, updates: Dict[str, Any]) -> Delivery:
        with self.transaction():
            delivery = self.get_delivery(delivery_id)
            for field, value in updates.items():
                if field not in _UPDATABLE_FIELDS or value is None:
                    continue
                if field == "status" and value not in {s.value for s in DeliveryStatus}:
                    raise ValidationException(f"Invalid status: {value}", code="invalid_status")
                if field == "scheduled_date":
                    value = as_date(value)
                elif field == "photos":
                    value = list(value)
                elif field == "customer_email":
                    value = str(value).strip().lower()
                setattr(delivery, field, value)
            self.repository.flush()
        return delivery

    def mark_ready(self, delivery_id: str, ready_at: Optional[datetime] = None) -> Delivery:
        with self.transaction():
            delivery = self.get_delivery(delivery_id)
            if delivery.status == DeliveryStatus.COMPLETED.value:
                raise ValidationException("Delivery already completed", code="already_completed")
            delivery.status = DeliveryStatus.READY.value
            delivery.ready_at = ready_at or utc_now()
            self.repository.flush()
        self.log_operation("mark_ready", delivery_id=delivery_id)
        return delivery

    def mark_completed(
        self,
        delivery_id: str,
        delivered_at: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> Delivery:
        with self.transaction():
            delivery = self.get_delivery(delivery_id)
            now = utc_now()
            delivery.status = DeliveryStatus.COMPLETED.value
            delivery.delivered_at = delivered_at or now
            delivery.completed_at = now
            if notes:
                delivery.notes = notes
            self.repository.flush()
        self.log_operation("mark_completed", delivery_id=delivery_id)
        return delivery

    def delete_delivery(self, delivery_id: str) -> None:
        with self.transaction():
            if not self.repository.delete(delivery_id):
                raise NotFoundException("Delivery not found", code="delivery_not_found")

    @BaseService.measure_operation("mark_overdue_deliveries")
    def mark_overdue(self, today: Optional[date] = None) -> int:
        with self.transaction():
            count = self.repository.mark_overdue(today or studio_today())
        prometheus_metrics.inc_maintenance_rows("mark_overdue_deliveries", count)
        if count:
            self.logger.info("Marked %d deliveries overdue", count)
        return count
