from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from liftlog.db import get_db
from liftlog.deps.auth import get_current_user, require_role
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.schemas.exercise import ExerciseCreate, ExerciseRead

router = APIRouter(prefix="/exercises", tags=["exercises"])

@router.get("", response_model=list[ExerciseRead], dependencies=[Depends(get_current_user)])
def list_exercises(
    db: Session = Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    page = ExerciseRepository(db).list(limit=limit, offset=offset)
    return page.items

@router.post("", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_role("admin"))])
def create_exercise(payload: ExerciseCreate, db: Session = Depends(get_db)):
    try:
        return ExerciseRepository(db).create(name=payload.name, description=payload.description)
    except ValueError as e:
        if str(e) == "exercise_already_exists":
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="exercise already exists")
        raise

@router.delete("/{exercise_id}", response_model=ExerciseRead, dependencies=[Depends(require_role("admin"))])
def delete_exercise(exercise_id: int, db: Session = Depends(get_db)):
    try:
        ex = ExerciseRepository(db).delete(exercise_id)
    except ValueError as e:
        if str(e) == "exercise_in_use":
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="exercise is used by a workout")
        raise
    if not ex:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found")
    return ex
