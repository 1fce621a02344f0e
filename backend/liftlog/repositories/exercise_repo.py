# liftlog/repositories/exercise_repo.py
from __future__ import annotations
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from liftlog.models import Exercise
from liftlog.repositories.base import BaseRepository, Page

class ExerciseRepository(BaseRepository[Exercise]):
    """Global exercise catalog. Not owner-scoped: every user sees the same rows."""
    model = Exercise

    # READS
    def get(self, exercise_id: int) -> Optional[Exercise]:
        return self.db.get(Exercise, exercise_id)

    def get_by_name(self, name: str) -> Optional[Exercise]:
        stmt = (
            select(Exercise)
            .where(func.lower(Exercise.name) == name.strip().lower())
            .order_by(Exercise.id.asc())
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list(self, *, limit: int = 50, offset: int = 0) -> Page[Exercise]:
        stmt = select(Exercise).order_by(Exercise.name.asc(), Exercise.id.asc())
        return self.page_from_stmt(stmt, limit=limit, offset=offset)

    # WRITES
    def create(self, *, name: str, description: str | None = None) -> Exercise:
        try:
            return self.add_and_commit(Exercise(name=name.strip(), description=description))
        except IntegrityError:
            self.db.rollback()
            # UNIQUE lower(name)
            raise ValueError("exercise_already_exists")

    def get_or_create(self, name: str) -> Exercise:
        """Catalog entries are created the first time a workout references them."""
        existing = self.get_by_name(name)
        if existing:
            return existing
        try:
            return self.create(name=name)
        except ValueError:
            # another request inserted the same name in between
            existing = self.get_by_name(name)
            if not existing:
                raise
            return existing

    def delete(self, exercise_id: int) -> Optional[Exercise]:
        ex = self.get(exercise_id)
        if not ex:
            return None
        try:
            self.db.delete(ex)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # workout_exercises.exercise_id is ON DELETE RESTRICT
            raise ValueError("exercise_in_use")
        return ex
