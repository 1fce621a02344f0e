# liftlog/repositories/workout_repo.py
from __future__ import annotations
from datetime import date
from typing import Any, Optional

from sqlalchemy import select, delete

from liftlog.dates import month_bounds
from liftlog.grouping import FlatRow, build_workout_tree
from liftlog.models import Exercise, Workout, WorkoutExercise, WorkoutSet
from liftlog.repositories.base import BaseRepository, Page, require_user
from liftlog.schemas.workout import WorkoutDetail

UPDATABLE_FIELDS = ("name", "date", "duration_minutes", "notes")


class WorkoutRepository(BaseRepository[Workout]):
    """
    Ownership-scoped access to workouts.

    Every statement carries ``Workout.user_id == user_id``. A workout that
    does not exist and one owned by someone else look the same to callers:
    both come back as ``None``.
    """
    model = Workout

    def _owned(self, user_id: str):
        return select(Workout).where(Workout.user_id == require_user(user_id))

    # READS
    def get_owned(self, workout_id: int, user_id: str) -> Optional[Workout]:
        stmt = self._owned(user_id).where(Workout.id == workout_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_by_date(self, user_id: str, day: date) -> list[WorkoutDetail]:
        # newest first when a day has several workouts
        stmt = self._owned(user_id).where(Workout.date == day)\
                                   .order_by(Workout.created_at.desc(), Workout.id.desc())
        workouts = list(self.db.execute(stmt).scalars().all())
        if not workouts:
            return []
        rows = self._flat_rows(user_id, [w.id for w in workouts])
        return build_workout_tree(workouts, rows)

    def get_detail(self, workout_id: int, user_id: str) -> Optional[WorkoutDetail]:
        workout = self.get_owned(workout_id, user_id)
        if not workout:
            return None
        return build_workout_tree([workout], self._flat_rows(user_id, [workout.id]))[0]

    def list_recent(self, user_id: str, *, limit: int = 10, offset: int = 0) -> Page[Workout]:
        stmt = self._owned(user_id).order_by(
            Workout.date.desc(), Workout.created_at.desc(), Workout.id.desc()
        )
        return self.page_from_stmt(stmt, limit=limit, offset=offset)

    def dates_in_range(self, user_id: str, start: date, end: date) -> list[date]:
        """Distinct days in [start, end] with at least one of the caller's workouts."""
        stmt = (
            select(Workout.date)
            .where(Workout.user_id == require_user(user_id), Workout.date >= start, Workout.date <= end)
            .distinct()
            .order_by(Workout.date.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def dates_for_month(self, user_id: str, year: int, month_index: int) -> list[date]:
        require_user(user_id)
        first, last = month_bounds(year, month_index)
        return self.dates_in_range(user_id, first, last)

    def _flat_rows(self, user_id: str, workout_ids: list[int]) -> list[FlatRow]:
        stmt = (
            select(
                WorkoutExercise.workout_id,
                WorkoutExercise.id.label("workout_exercise_id"),
                WorkoutExercise.exercise_id,
                Exercise.name.label("exercise_name"),
                WorkoutExercise.order,
                WorkoutSet.id.label("set_id"),
                WorkoutSet.set_number,
                WorkoutSet.reps,
                WorkoutSet.weight,
                WorkoutSet.rpe,
                WorkoutSet.is_bodyweight,
            )
            .join(Workout, Workout.id == WorkoutExercise.workout_id)
            .join(Exercise, Exercise.id == WorkoutExercise.exercise_id)
            .outerjoin(WorkoutSet, WorkoutSet.workout_exercise_id == WorkoutExercise.id)
            .where(Workout.user_id == user_id, WorkoutExercise.workout_id.in_(workout_ids))
            .order_by(WorkoutExercise.order.asc(), WorkoutExercise.id.asc(), WorkoutSet.set_number.asc())
        )
        return [FlatRow(**row._mapping) for row in self.db.execute(stmt)]

    # WRITES
    def create(
        self,
        user_id: str,
        *,
        date: date,
        name: str | None = None,
        duration_minutes: int | None = None,
        notes: str | None = None,
    ) -> Workout:
        # user_id only ever comes from the resolved identity, never the payload
        workout = Workout(
            user_id=require_user(user_id), date=date, name=name, duration_minutes=duration_minutes, notes=notes
        )
        return self.add_and_commit(workout)

    def update(self, workout_id: int, user_id: str, data: dict[str, Any]) -> Optional[tuple[Workout, date]]:
        """Apply a partial update. Return (workout, date before the update) or None."""
        workout = self.get_owned(workout_id, user_id)
        if not workout:
            return None
        previous_date = workout.date
        for field, value in data.items():
            if field not in UPDATABLE_FIELDS:
                raise ValueError(f"unknown_field:{field}")
            setattr(workout, field, value)
        return self.commit_and_refresh(workout), previous_date

    def delete(self, workout_id: int, user_id: str) -> Optional[Workout]:
        """
        Delete a workout with its exercises and sets in one transaction.

        Children go first, explicitly, so the result is the same whether or
        not the database enforces ON DELETE CASCADE.
        """
        workout = self.get_owned(workout_id, user_id)
        if not workout:
            return None
        exercise_ids = select(WorkoutExercise.id).where(WorkoutExercise.workout_id == workout.id)
        try:
            self.db.execute(
                delete(WorkoutSet)
                .where(WorkoutSet.workout_exercise_id.in_(exercise_ids))
                .execution_options(synchronize_session=False)
            )
            self.db.execute(
                delete(WorkoutExercise)
                .where(WorkoutExercise.workout_id == workout.id)
                .execution_options(synchronize_session=False)
            )
            self.db.delete(workout)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return workout
