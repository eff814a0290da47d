"""Invoice request queries."""

from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import RepositoryException
from app.models.invoice import InvoiceRequest

from .base_repository import BaseRepository


class InvoiceRequestRepository(BaseRepository[InvoiceRequest]):
    def __init__(self, db: Session):
        super().__init__(db, InvoiceRequest)

    def list_requests(self, *, status: Optional[str] = None) -> List[InvoiceRequest]:
        query = self.query()
        if status:
            query = query.filter(InvoiceRequest.status == status)
        return query.order_by(InvoiceRequest.requested_at.desc(), InvoiceRequest.id.desc()).all()

    def delete_for_bookings(self, booking_ids: Iterable[str]) -> int:
        """Remove every invoice request tied to the given bookings."""
        ids = [i for i in booking_ids if i]
        if not ids:
            return 0
        try:
            deleted = (
                self.query()
                .filter(InvoiceRequest.booking_id.in_(ids))
                .delete(synchronize_session="fetch")
            )
            return int(deleted or 0)
        except SQLAlchemyError as exc:
            self.logger.error("Failed to delete invoice requests: %s", str(exc))
            raise RepositoryException("Failed to delete invoice requests") from exc
