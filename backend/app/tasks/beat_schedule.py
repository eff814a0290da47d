# backend/app/tasks/beat_schedule.py
"""
Celery Beat schedule configuration for the studio platform.

Crontab entries run in the studio timezone (``celery_app.conf.timezone``).
"""

from datetime import timedelta
import logging
from typing import Any, Dict

from celery.schedules import crontab

logger = logging.getLogger(__name__)

CELERYBEAT_SCHEDULE: Dict[str, Dict[str, Any]] = {
    # Unpaid pre-reservations give their seats back after 2 hours
    "expire-prebookings": {
        "task": "app.tasks.maintenance.expire_prebookings",
        "schedule": timedelta(minutes=10),
        "options": {"queue": "maintenance", "priority": 5},
    },
    "cleanup-expired-giftcard-holds": {
        "task": "app.tasks.maintenance.cleanup_expired_giftcard_holds",
        "schedule": timedelta(minutes=5),
        "options": {"queue": "maintenance", "priority": 5},
    },
    "mark-overdue-deliveries": {
        "task": "app.tasks.maintenance.mark_overdue_deliveries",
        "schedule": crontab(hour=6, minute=0),
        "options": {"queue": "maintenance", "priority": 3},
    },
}


def get_beat_schedule(environment: str = "production") -> Dict[str, Dict[str, Any]]:
    """
    Get beat schedule based on environment.

    Outside production every job goes to the default queue so a single
    local worker picks everything up.
    """
    if environment == "production":
        return CELERYBEAT_SCHEDULE

    schedule: Dict[str, Dict[str, Any]] = {}
    for name, entry in CELERYBEAT_SCHEDULE.items():
        options = {**entry.get("options", {}), "queue": "celery"}
        schedule[name] = {**entry, "options": options}
    logger.debug("Using %s beat schedule with %d entries", environment, len(schedule))
    return schedule
