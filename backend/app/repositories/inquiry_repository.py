"""Group inquiry queries."""

from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.inquiry import Inquiry

from .base_repository import BaseRepository


class InquiryRepository(BaseRepository[Inquiry]):
    def __init__(self, db: Session):
        super().__init__(db, Inquiry)

    def list_inquiries(self, *, status: Optional[str] = None) -> List[Inquiry]:
        query = self.query()
        if status:
            query = query.filter(Inquiry.status == status)
        return query.order_by(Inquiry.created_at.desc(), Inquiry.id.desc()).all()
