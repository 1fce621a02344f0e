from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from liftlog.db import get_db
from liftlog.dates import parse_local, today_local
from liftlog.deps.auth import CurrentUser, get_current_user
from liftlog.invalidation import invalidate_workout_views
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.repositories.workout_exercise_repo import WorkoutExerciseRepository
from liftlog.repositories.workout_repo import WorkoutRepository
from liftlog.schemas.workout import WorkoutCreate, WorkoutDetail, WorkoutRead, WorkoutUpdate
from liftlog.schemas.workout_exercise import WorkoutExerciseCreate, WorkoutExerciseRead

router = APIRouter(prefix="/workouts", tags=["workouts"])

# Same answer for "no such workout" and "someone else's workout"
WORKOUT_NOT_FOUND = "Workout not found or unauthorized"

def _query_date(value: str | None, name: str) -> date | None:
    if value is None:
        return None
    try:
        return parse_local(value)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"{name}: {e}")

@router.get("", response_model=list[WorkoutDetail])
def list_workouts_for_day(
    day: str | None = Query(None, alias="date", description="YYYY-MM-DD, defaults to today"),
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    target = _query_date(day, "date") or today_local()
    return WorkoutRepository(db).list_by_date(current.id, target)

@router.get("/recent", response_model=list[WorkoutRead])
def list_recent_workouts(
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    page = WorkoutRepository(db).list_recent(current.id, limit=limit, offset=offset)
    return page.items

@router.get("/calendar", response_model=list[date])
def workout_dates_for_month(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=0, le=11, description="zero-based month"),
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return WorkoutRepository(db).dates_for_month(current.id, year, month)

@router.get("/dates", response_model=list[date])
def workout_dates_in_range(
    start: str = Query(...),
    end: str = Query(...),
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    first, last = _query_date(start, "start"), _query_date(end, "end")
    if first > last:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="start must not be after end")
    return WorkoutRepository(db).dates_in_range(current.id, first, last)

@router.get("/{workout_id}", response_model=WorkoutDetail)
def get_workout(workout_id: int, current: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    detail = WorkoutRepository(db).get_detail(workout_id, current.id)
    if not detail:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=WORKOUT_NOT_FOUND)
    return detail

@router.post("", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
def create_workout(payload: WorkoutCreate, current: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    workout = WorkoutRepository(db).create(
        current.id,
        date=payload.date,
        name=payload.name,
        duration_minutes=payload.duration_minutes,
        notes=payload.notes,
    )
    invalidate_workout_views(current.id, workout_ids=[workout.id], dates=[workout.date])
    return workout

@router.patch("/{workout_id}", response_model=WorkoutRead)
def update_workout(
    workout_id: int,
    payload: WorkoutUpdate,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = WorkoutRepository(db).update(workout_id, current.id, payload.changes())
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=WORKOUT_NOT_FOUND)
    workout, previous_date = result
    invalidate_workout_views(current.id, workout_ids=[workout.id], dates=[previous_date, workout.date])
    return workout

@router.delete("/{workout_id}", response_model=WorkoutRead)
def delete_workout(workout_id: int, current: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    deleted = WorkoutRepository(db).delete(workout_id, current.id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=WORKOUT_NOT_FOUND)
    invalidate_workout_views(current.id, workout_ids=[deleted.id], dates=[deleted.date])
    return deleted

@router.post("/{workout_id}/exercises", response_model=WorkoutExerciseRead, status_code=status.HTTP_201_CREATED)
def add_exercise_to_workout(
    workout_id: int,
    payload: WorkoutExerciseCreate,
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    workout = WorkoutRepository(db).get_owned(workout_id, current.id)
    if not workout:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=WORKOUT_NOT_FOUND)
    day = workout.date

    exercises = ExerciseRepository(db)
    if payload.exercise_id is not None:
        exercise = exercises.get(payload.exercise_id)
        if not exercise:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found")
    else:
        exercise = exercises.get_or_create(payload.exercise_name)

    try:
        we = WorkoutExerciseRepository(db).add(
            workout, exercise_id=exercise.id, order=payload.order, notes=payload.notes
        )
    except ValueError as e:
        if str(e) == "exercise_already_in_workout":
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="exercise already in this workout")
        raise
    invalidate_workout_views(current.id, workout_ids=[workout_id], dates=[day])
    return we
