# backend/app/repositories/delivery_repository.py
"""Delivery queries."""

from __future__ import annotations

from datetime import date
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.enums import DeliveryStatus
from app.core.exceptions import RepositoryException
from app.models.delivery import Delivery

from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class DeliveryRepository(BaseRepository[Delivery]):
    def __init__(self, db: Session):
        super().__init__(db, Delivery)

    def list_deliveries(
        self, *, email: Optional[str] = None, status: Optional[str] = None
    ) -> List[Delivery]:
        query = self.query()
        if email:
            query = query.filter(Delivery.customer_email == email.strip().lower())
        if status:
            query = query.filter(Delivery.status == status)
        return query.order_by(Delivery.scheduled_date.asc(), Delivery.created_at.asc()).all()

    def mark_overdue(self, today: date) -> int:
        """Flip pending deliveries scheduled before ``today`` to overdue."""
        try:
            updated = (
                self.query()
                .filter(
                    Delivery.status == DeliveryStatus.PENDING.value,
                    Delivery.scheduled_date < today,
                )
                .update(
                    {Delivery.status: DeliveryStatus.OVERDUE.value}, synchronize_session="fetch"
                )
            )
            return int(updated or 0)
        except SQLAlchemyError as exc:
            self.logger.error("Failed to mark overdue deliveries: %s", str(exc))
            raise RepositoryException("Failed to mark overdue deliveries") from exc
