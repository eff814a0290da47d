"""Admin notification inbox schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from ._strict_base import ORMResponseModel, StrictModel


class NotificationResponse(ORMResponseModel):
    id: str
    type: str
    title: str
    message: Optional[str] = None
    booking_id: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    read: bool
    created_at: Optional[datetime] = None


class NotificationListResponse(StrictModel):
    notifications: List[NotificationResponse]
    unread_count: int
