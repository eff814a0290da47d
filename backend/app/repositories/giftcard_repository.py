# backend/app/repositories/giftcard_repository.py
"""
Giftcard Repositories for the studio platform.

Encapsulates the balance/hold queries behind the giftcard reservation
lifecycle: available balance is the stored balance minus every hold that
has not yet expired.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional, cast

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.enums import GiftcardRequestStatus
from app.core.exceptions import RepositoryException
from app.models.giftcard import (
    Giftcard,
    GiftcardAudit,
    GiftcardEvent,
    GiftcardHold,
    GiftcardRequest,
)

from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class GiftcardRepository(BaseRepository[Giftcard]):
    def __init__(self, db: Session):
        super().__init__(db, Giftcard)

    def get_by_code(self, code: str, *, for_update: bool = False) -> Optional[Giftcard]:
        query = self.query().filter(Giftcard.code == code.strip().upper())
        if for_update:
            query = query.with_for_update()
        return cast(Optional[Giftcard], query.first())

    def code_exists(self, code: str) -> bool:
        return self.exists(code=code)

    def list_giftcards(self, *, status: Optional[str] = None, limit: int = 200) -> List[Giftcard]:
        query = self.query()
        if status:
            query = query.filter(Giftcard.status == status)
        return query.order_by(Giftcard.created_at.desc()).limit(limit).all()


class GiftcardRequestRepository(BaseRepository[GiftcardRequest]):
    def __init__(self, db: Session):
        super().__init__(db, GiftcardRequest)

    def list_requests(self, *, status: Optional[str] = None) -> List[GiftcardRequest]:
        query = self.query()
        if status:
            query = query.filter(GiftcardRequest.status == status)
        return query.order_by(GiftcardRequest.created_at.desc()).all()

    def find_by_code(self, code: str) -> Optional[GiftcardRequest]:
        """
        Match a request by its purchase code or by the code issued on approval.

        The issued code lives inside the metadata document, so that match is
        done in Python.
        """
        normalized = code.strip().upper()
        direct = (
            self.query()
            .filter(func.upper(GiftcardRequest.code) == normalized)
            .order_by(GiftcardRequest.created_at.desc())
            .first()
        )
        if direct is not None:
            return direct
        approved = self.query().filter(
            GiftcardRequest.status == GiftcardRequestStatus.APPROVED.value
        )
        for request in approved.all():
            issued = (request.request_metadata or {}).get("issued_code")
            if issued and str(issued).upper() == normalized:
                return request
        return None


class GiftcardHoldRepository(BaseRepository[GiftcardHold]):
    def __init__(self, db: Session):
        super().__init__(db, GiftcardHold)

    def sum_active_holds(self, giftcard_id: str, now: datetime) -> Decimal:
        """Total amount reserved by holds that have not expired yet."""
        try:
            total = (
                self.db.query(func.coalesce(func.sum(GiftcardHold.amount), 0))
                .filter(GiftcardHold.giftcard_id == giftcard_id, GiftcardHold.expires_at > now)
                .scalar()
            )
            return Decimal(str(total or 0))
        except SQLAlchemyError as exc:
            self.logger.error("Failed to sum holds for %s: %s", giftcard_id, str(exc))
            raise RepositoryException("Failed to sum giftcard holds") from exc

    def get_expired(self, now: datetime, limit: Optional[int] = None) -> List[GiftcardHold]:
        """Expired holds, oldest first, locked for deletion."""
        try:
            query = (
                self.query()
                .filter(GiftcardHold.expires_at <= now)
                .order_by(GiftcardHold.expires_at.asc(), GiftcardHold.id.asc())
                .with_for_update()
            )
            if limit:
                query = query.limit(limit)
            return query.all()
        except SQLAlchemyError as exc:
            self.logger.error("Failed to load expired holds: %s", str(exc))
            raise RepositoryException("Failed to load expired holds") from exc

    def list_for_booking(self, booking_id: str) -> List[GiftcardHold]:
        return self.find_by(booking_id=booking_id)


class GiftcardAuditRepository(BaseRepository[GiftcardAudit]):
    def __init__(self, db: Session):
        super().__init__(db, GiftcardAudit)

    def record(
        self,
        action: str,
        *,
        giftcard_id: Optional[str] = None,
        hold_id: Optional[str] = None,
        booking_id: Optional[str] = None,
        amount: Optional[Decimal] = None,
        status: str = "success",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> GiftcardAudit:
        return self.create(
            action=action,
            giftcard_id=giftcard_id,
            hold_id=hold_id,
            booking_id=booking_id,
            amount=amount,
            status=status,
            audit_metadata=metadata,
        )

    def list_for_giftcard(self, giftcard_id: str) -> List[GiftcardAudit]:
        return (
            self.query()
            .filter(GiftcardAudit.giftcard_id == giftcard_id)
            .order_by(GiftcardAudit.created_at.asc(), GiftcardAudit.id.asc())
            .all()
        )


class GiftcardEventRepository(BaseRepository[GiftcardEvent]):
    def __init__(self, db: Session):
        super().__init__(db, GiftcardEvent)

    def list_for_request(self, request_id: str) -> List[GiftcardEvent]:
        return (
            self.query()
            .filter(GiftcardEvent.giftcard_request_id == request_id)
            .order_by(GiftcardEvent.created_at.asc())
            .all()
        )
