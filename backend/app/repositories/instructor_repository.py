# backend/app/repositories/instructor_repository.py
"""Instructor lookups for schedule rendering and the admin roster."""

from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from app.models.instructor import Instructor

from .base_repository import BaseRepository


class InstructorRepository(BaseRepository[Instructor]):
    def __init__(self, db: Session):
        super().__init__(db, Instructor)

    def list_all(self) -> List[Instructor]:
        return self.query().order_by(Instructor.name).all()

    def list_active(self) -> List[Instructor]:
        return self.query().filter(Instructor.is_active.is_(True)).order_by(Instructor.name).all()

    def get_names(self, ids: Iterable[str]) -> Dict[str, str]:
        """Map instructor id to display name for the given ids."""
        wanted = {i for i in ids if i}
        if not wanted:
            return {}
        rows = self.query().filter(Instructor.id.in_(wanted)).all()
        return {row.id: row.name for row in rows}
