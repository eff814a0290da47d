# backend/app/tasks/maintenance.py
"""
Periodic maintenance tasks.

Each task opens its own session through ``get_db_session`` and delegates
to the same service methods the maintenance endpoints use.
"""

import logging
from typing import Any, Callable, Dict, TypeVar, cast

from celery import shared_task

from app.database.sessions import get_db_session
from app.services.booking_service import BookingService
from app.services.delivery_service import DeliveryService
from app.services.giftcard_service import GiftcardService

logger = logging.getLogger(__name__)

_TaskFunc = TypeVar("_TaskFunc", bound=Callable[..., Any])

HOLD_CLEANUP_BATCH = 500


def _typed_shared_task(*args: Any, **kwargs: Any) -> Callable[[_TaskFunc], _TaskFunc]:
    """Typed wrapper for Celery's shared_task decorator."""
    return cast(Callable[[_TaskFunc], _TaskFunc], shared_task(*args, **kwargs))


@_typed_shared_task(name="app.tasks.maintenance.expire_prebookings")
def expire_prebookings() -> Dict[str, int]:
    with get_db_session() as db:
        expired = BookingService(db).expire_prebookings()
    if expired:
        logger.info("[MAINT] Expired %d pre-reservation(s)", expired)
    return {"expired": expired}


@_typed_shared_task(name="app.tasks.maintenance.cleanup_expired_giftcard_holds")
def cleanup_expired_giftcard_holds(limit: int = HOLD_CLEANUP_BATCH) -> Dict[str, int]:
    with get_db_session() as db:
        result = GiftcardService(db).cleanup_expired_holds(limit)
    return {"deleted": result["deleted"]}


@_typed_shared_task(name="app.tasks.maintenance.mark_overdue_deliveries")
def mark_overdue_deliveries() -> Dict[str, int]:
    """Flag pending deliveries whose scheduled date has passed."""
    with get_db_session() as db:
        updated = DeliveryService(db).mark_overdue()
    return {"updated": updated}
