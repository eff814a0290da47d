# backend/app/models/studio_setting.py
"""
Key/value studio settings.

Holds the weekly availability template, per-date schedule overrides and
class capacities as JSON documents, edited from the admin panel.
"""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from ..core.timezone_utils import utc_now
from ..database import Base
from .types import JSONDocument


class StudioSetting(Base):
    __tablename__ = "studio_settings"

    key = Column(String(64), primary_key=True)
    value = Column(JSONDocument, nullable=True)
    updated_at = Column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<StudioSetting {self.key}>"
