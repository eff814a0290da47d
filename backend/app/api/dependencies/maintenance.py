"""Guard for maintenance endpoints that cron jobs call over HTTP."""

import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from ...core.config import settings


def verify_maintenance_secret(
    x_cleanup_secret: Optional[str] = Header(None, alias="X-Cleanup-Secret"),
) -> None:
    """Require ``X-Cleanup-Secret`` when ``MAINTENANCE_SECRET`` is configured."""
    if settings.maintenance_secret is None:
        return
    expected = settings.maintenance_secret.get_secret_value()
    if not x_cleanup_secret or not secrets.compare_digest(x_cleanup_secret, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": "Invalid maintenance secret",
                "code": "forbidden",
                "details": {},
            },
        )
