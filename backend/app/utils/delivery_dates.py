"""
Delivery date calculations.

Two deadlines apply to a piece: the scheduled finishing date, and the pickup
window that opens once the piece is ready (``delivery_ready_retention_days``).
"""

from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

from ..core.config import settings
from ..core.enums import DeliveryStatus
from ..core.timezone_utils import studio_today, to_studio_time

DateLike = Union[date, datetime, str]


def _local_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return to_studio_time(value).date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def days_until(target: DateLike, today: Optional[date] = None) -> int:
    """Whole days from today to ``target``; negative once it has passed."""
    return (_local_date(target) - (today or studio_today())).days


def ready_expiration(ready_at: datetime) -> datetime:
    return ready_at + timedelta(days=settings.delivery_ready_retention_days)


def scheduled_status(days: int) -> str:
    if days > 1:
        return "upcoming"
    if days == 1:
        return "tomorrow"
    if days == 0:
        return "today"
    return "overdue"


def ready_status(days: int) -> str:
    if days <= 0:
        return "expired"
    if days <= settings.delivery_urgency_days:
        return "warning"
    return "ok"


def is_critically_urgent(delivery: Any, today: Optional[date] = None) -> bool:
    """
    Pending pieces past their scheduled date, or ready pieces whose pickup
    window closes within the urgency horizon (but has not closed yet).
    """
    if (
        delivery.status == DeliveryStatus.PENDING.value
        and days_until(delivery.scheduled_date, today) < 0
    ):
        return True
    if delivery.ready_at is not None:
        remaining = days_until(ready_expiration(delivery.ready_at), today)
        return 0 < remaining <= settings.delivery_urgency_days
    return False
