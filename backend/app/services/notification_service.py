# backend/app/services/notification_service.py
"""
Admin notification inbox.

Services call ``notify`` inside their own transaction; the row commits
together with the change it describes.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..models.notification import Notification
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_notification_repository(db)

    def notify(
        self,
        type: str,
        title: str,
        message: Optional[str] = None,
        *,
        booking_id: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        """Queue a notification in the current transaction (no commit)."""
        notification = self.repository.create(
            type=type, title=title, message=message, booking_id=booking_id, data=data
        )
        logger.info("Notification %s queued for booking %s", type, booking_id)
        return notification

    def list_notifications(
        self, *, unread_only: bool = False, limit: int = 100
    ) -> List[Notification]:
        return self.repository.list_recent(unread_only=unread_only, limit=limit)

    def mark_read(self, notification_id: str) -> Notification:
        with self.transaction():
            notification = self.repository.get_by_id(notification_id)
            if notification is None:
                raise NotFoundException("Notification not found", code="notification_not_found")
            notification.read = True
            self.repository.flush()
        return notification
