"""
Rebuild the workout -> exercise -> set tree from flat joined rows.

Every hierarchical read goes through ``build_workout_tree`` so the dashboard
view and the single-workout view cannot disagree on grouping or ordering.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, NamedTuple, Sequence

from liftlog.models import Workout
from liftlog.schemas.workout import ExerciseEntry, SetEntry, WorkoutDetail


class FlatRow(NamedTuple):
    """One row of workout_exercises JOIN exercises LEFT JOIN sets."""
    workout_id: int
    workout_exercise_id: int
    exercise_id: int
    exercise_name: str
    order: int | None
    set_id: int | None = None
    set_number: int | None = None
    reps: int | None = None
    weight: Decimal | float | None = None
    rpe: int | None = None
    is_bodyweight: bool | None = None


def _weight(value: Decimal | float | None) -> float | None:
    # 0 is a real load, only NULL means "no weight"
    return None if value is None else float(value)


def group_exercises(rows: Iterable[FlatRow]) -> dict[int, list[ExerciseEntry]]:
    """
    Group rows by workout, then by exercise.

    The first row seen for an exercise opens its entry; a row without a set
    (LEFT JOIN miss) contributes nothing else. Sets end up sorted by
    ``set_number`` and exercises by persisted ``order``, with first-seen
    order breaking ties.
    """
    by_workout: dict[int, dict[int, ExerciseEntry]] = {}
    for row in rows:
        exercises = by_workout.setdefault(row.workout_id, {})
        entry = exercises.get(row.exercise_id)
        if entry is None:
            entry = ExerciseEntry(
                id=row.exercise_id,
                workout_exercise_id=row.workout_exercise_id,
                name=row.exercise_name,
                order=row.order,
            )
            exercises[row.exercise_id] = entry
        if row.set_id is None:
            continue
        entry.sets.append(
            SetEntry(
                id=row.set_id,
                set_number=row.set_number,
                weight=_weight(row.weight),
                reps=row.reps,
                rpe=row.rpe,
                is_bodyweight=bool(row.is_bodyweight),
            )
        )

    grouped: dict[int, list[ExerciseEntry]] = {}
    for workout_id, exercises in by_workout.items():
        entries = list(exercises.values())
        for entry in entries:
            entry.sets.sort(key=lambda s: s.set_number)
        # stable sort keeps insertion order for equal / missing `order`
        entries.sort(key=lambda e: (e.order is None, e.order or 0))
        grouped[workout_id] = entries
    return grouped


def build_workout_tree(workouts: Sequence[Workout], rows: Iterable[FlatRow]) -> list[WorkoutDetail]:
    """Attach grouped exercises to workouts, keeping the workouts' given order."""
    grouped = group_exercises(rows)
    return [
        WorkoutDetail(
            id=w.id,
            name=w.name,
            date=w.date,
            duration_minutes=w.duration_minutes,
            notes=w.notes,
            exercises=grouped.get(w.id, []),
        )
        for w in workouts
    ]
