# backend/app/repositories/notification_repository.py
"""Admin notification queries."""

from typing import List

from sqlalchemy.orm import Session

from app.models.notification import Notification

from .base_repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    def __init__(self, db: Session):
        super().__init__(db, Notification)

    def list_recent(self, *, unread_only: bool = False, limit: int = 100) -> List[Notification]:
        query = self.query()
        if unread_only:
            query = query.filter(Notification.read.is_(False))
        return query.order_by(Notification.created_at.desc()).limit(limit).all()
