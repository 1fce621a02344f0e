# liftlog/repositories/workout_exercise_repo.py
from __future__ import annotations
from typing import Any, NamedTuple, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError

from liftlog.models import Workout, WorkoutExercise, WorkoutSet
from liftlog.repositories.base import BaseRepository, require_user

class OwnedWorkoutExercise(NamedTuple):
    workout_exercise: WorkoutExercise
    workout: Workout

class WorkoutExerciseRepository(BaseRepository[WorkoutExercise]):
    """Exercises inside a workout; ownership comes from the parent workout."""
    model = WorkoutExercise

    # READS
    def get_owned(self, workout_exercise_id: int, user_id: str) -> Optional[OwnedWorkoutExercise]:
        stmt = (
            select(WorkoutExercise, Workout)
            .join(Workout, Workout.id == WorkoutExercise.workout_id)
            .where(WorkoutExercise.id == workout_exercise_id, Workout.user_id == require_user(user_id))
        )
        row = self.db.execute(stmt).one_or_none()
        return OwnedWorkoutExercise(*row) if row else None

    # WRITES
    def add(self, workout: Workout, *, exercise_id: int, order: int = 0, notes: str | None = None) -> WorkoutExercise:
        """`workout` must already be resolved through WorkoutRepository.get_owned."""
        we = WorkoutExercise(workout_id=workout.id, exercise_id=exercise_id, order=order, notes=notes)
        try:
            return self.add_and_commit(we)
        except IntegrityError:
            self.db.rollback()
            # UNIQUE (workout_id, exercise_id)
            raise ValueError("exercise_already_in_workout")

    def update(self, we: WorkoutExercise, data: dict[str, Any]) -> WorkoutExercise:
        for field in ("order", "notes"):
            if field in data:
                setattr(we, field, data[field])
        return self.commit_and_refresh(we)

    def remove(self, we: WorkoutExercise) -> WorkoutExercise:
        """Drop the exercise and its sets together."""
        try:
            self.db.execute(
                delete(WorkoutSet)
                .where(WorkoutSet.workout_exercise_id == we.id)
                .execution_options(synchronize_session=False)
            )
            self.db.delete(we)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return we
