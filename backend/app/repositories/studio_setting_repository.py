# backend/app/repositories/studio_setting_repository.py
"""Key/value access to studio settings documents."""

from typing import Any

from sqlalchemy.orm import Session

from app.models.studio_setting import StudioSetting

from .base_repository import BaseRepository


class StudioSettingRepository(BaseRepository[StudioSetting]):
    def __init__(self, db: Session):
        super().__init__(db, StudioSetting)

    def get_value(self, key: str, default: Any = None) -> Any:
        row = self.get_by_id(key)
        if row is None or row.value is None:
            return default
        return row.value

    def set_value(self, key: str, value: Any) -> StudioSetting:
        row = self.get_by_id(key)
        if row is None:
            return self.create(key=key, value=value)
        row.value = value
        self.flush()
        return row
