from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from liftlog.db import get_db
from liftlog.deps.auth import CurrentUser, get_current_user
from liftlog.invalidation import invalidate_workout_views
from liftlog.repositories.set_repo import SetRepository
from liftlog.repositories.workout_exercise_repo import WorkoutExerciseRepository
from liftlog.schemas.workout_exercise import WorkoutExerciseRead, WorkoutExerciseUpdate
from liftlog.schemas.workout_set import SetCreate, SetRead, SetUpdate

router = APIRouter(tags=["sets"])

ENTRY_NOT_FOUND = "Workout exercise not found or unauthorized"
SET_NOT_FOUND = "Set not found or unauthorized"

def _owned_entry(db: Session, workout_exercise_id: int, current: CurrentUser):
    owned = WorkoutExerciseRepository(db).get_owned(workout_exercise_id, current.id)
    if not owned:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ENTRY_NOT_FOUND)
    return owned

@router.patch("/workout-exercises/{workout_exercise_id}", response_model=WorkoutExerciseRead)
def update_workout_exercise(
    workout_exercise_id: int,
    payload: WorkoutExerciseUpdate,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    owned = _owned_entry(db, workout_exercise_id, current)
    we = WorkoutExerciseRepository(db).update(owned.workout_exercise, payload.changes())
    invalidate_workout_views(current.id, workout_ids=[owned.workout.id], dates=[owned.workout.date])
    return we

@router.delete("/workout-exercises/{workout_exercise_id}", response_model=WorkoutExerciseRead)
def remove_workout_exercise(
    workout_exercise_id: int,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    owned = _owned_entry(db, workout_exercise_id, current)
    workout_id, day = owned.workout.id, owned.workout.date
    removed = WorkoutExerciseRepository(db).remove(owned.workout_exercise)
    invalidate_workout_views(current.id, workout_ids=[workout_id], dates=[day])
    return removed

@router.post(
    "/workout-exercises/{workout_exercise_id}/sets",
    response_model=SetRead,
    status_code=status.HTTP_201_CREATED,
)
def add_set(
    workout_exercise_id: int,
    payload: SetCreate,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    owned = _owned_entry(db, workout_exercise_id, current)
    workout_id, day = owned.workout.id, owned.workout.date
    try:
        new_set = SetRepository(db).create(owned.workout_exercise, **payload.model_dump())
    except ValueError as e:
        if str(e) == "set_constraint_violation":
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="set values violate constraints")
        raise
    invalidate_workout_views(current.id, workout_ids=[workout_id], dates=[day])
    return new_set

@router.patch("/sets/{set_id}", response_model=SetRead)
def update_set(
    set_id: int,
    payload: SetUpdate,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    repo = SetRepository(db)
    owned = repo.get_owned(set_id, current.id)
    if not owned:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=SET_NOT_FOUND)
    workout_id, day = owned.workout.id, owned.workout.date
    try:
        updated = repo.update(owned.set, payload.changes())
    except ValueError as e:
        if str(e) == "set_constraint_violation":
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="set values violate constraints")
        raise
    invalidate_workout_views(current.id, workout_ids=[workout_id], dates=[day])
    return updated

@router.delete("/sets/{set_id}", response_model=SetRead)
def delete_set(set_id: int, current: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    repo = SetRepository(db)
    owned = repo.get_owned(set_id, current.id)
    if not owned:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=SET_NOT_FOUND)
    workout_id, day = owned.workout.id, owned.workout.date
    deleted = repo.delete(owned.set)
    invalidate_workout_views(current.id, workout_ids=[workout_id], dates=[day])
    return deleted
