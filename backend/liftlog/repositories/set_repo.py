# liftlog/repositories/set_repo.py
from __future__ import annotations
from typing import Any, NamedTuple, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from liftlog.models import Workout, WorkoutExercise, WorkoutSet
from liftlog.repositories.base import BaseRepository, require_user

SET_FIELDS = ("set_number", "reps", "weight", "rpe", "is_bodyweight", "notes")

class OwnedSet(NamedTuple):
    set: WorkoutSet
    workout: Workout

class SetRepository(BaseRepository[WorkoutSet]):
    model = WorkoutSet

    # READS
    def get_owned(self, set_id: int, user_id: str) -> Optional[OwnedSet]:
        # Set -> WorkoutExercise -> Workout.user_id
        stmt = (
            select(WorkoutSet, Workout)
            .join(WorkoutExercise, WorkoutExercise.id == WorkoutSet.workout_exercise_id)
            .join(Workout, Workout.id == WorkoutExercise.workout_id)
            .where(WorkoutSet.id == set_id, Workout.user_id == require_user(user_id))
        )
        row = self.db.execute(stmt).one_or_none()
        return OwnedSet(*row) if row else None

    def list_by_workout_exercise(self, workout_exercise_id: int) -> list[WorkoutSet]:
        stmt = select(WorkoutSet).where(WorkoutSet.workout_exercise_id == workout_exercise_id)\
                                 .order_by(WorkoutSet.set_number.asc(), WorkoutSet.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    # WRITES
    def create(
        self,
        workout_exercise: WorkoutExercise,
        *,
        reps: int,
        set_number: Optional[int] = None,
        weight: float | None = None,
        rpe: int | None = None,
        is_bodyweight: bool = False,
        notes: str | None = None,
    ) -> WorkoutSet:
        if set_number is None:
            # Auto-increment based on current max for this exercise
            max_num = self.db.execute(
                select(func.max(WorkoutSet.set_number))
                .where(WorkoutSet.workout_exercise_id == workout_exercise.id)
            ).scalar_one()
            set_number = (max_num or 0) + 1

        s = WorkoutSet(
            workout_exercise_id=workout_exercise.id,
            set_number=set_number,
            reps=reps,
            weight=weight,
            rpe=rpe,
            is_bodyweight=is_bodyweight,
            notes=notes,
        )
        try:
            return self.add_and_commit(s)
        except IntegrityError:
            self.db.rollback()
            # CHECK constraints on reps / set_number / weight / rpe
            raise ValueError("set_constraint_violation")

    def update(self, s: WorkoutSet, data: dict[str, Any]) -> WorkoutSet:
        for field, value in data.items():
            if field in SET_FIELDS:
                setattr(s, field, value)
        try:
            return self.commit_and_refresh(s)
        except IntegrityError:
            self.db.rollback()
            raise ValueError("set_constraint_violation")

    def delete(self, s: WorkoutSet) -> WorkoutSet:
        self.db.delete(s)
        self.db.commit()
        return s
