import datetime as dt
from typing import Annotated
from pydantic import BaseModel, Field, StringConstraints, computed_field, field_validator

from liftlog.dates import to_calendar_date
from liftlog.models.workout import UNTITLED_WORKOUT

# Names: trimmed, 1..100 chars
NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
NotesStr = Annotated[str, Field(max_length=1000)]
PosInt = Annotated[int, Field(ge=1)]


def _calendar_date(v):
    # strings go through parse_local; pydantic's own date parsing accepts too much
    try:
        return to_calendar_date(v)
    except (TypeError, ValueError):
        raise ValueError("date must be a YYYY-MM-DD calendar date")


class WorkoutCreate(BaseModel):
    date: dt.date
    name: NameStr | None = None
    duration_minutes: PosInt | None = None
    notes: NotesStr | None = None

    @field_validator("date", mode="before")
    @classmethod
    def date_is_calendar_date(cls, v):
        return _calendar_date(v)


class WorkoutUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied."""
    date: dt.date | None = None
    name: NameStr | None = None
    duration_minutes: PosInt | None = None
    notes: NotesStr | None = None

    @field_validator("date", mode="before")
    @classmethod
    def date_not_null(cls, v):
        if v is None:
            raise ValueError("date cannot be null")
        return _calendar_date(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class WorkoutRead(BaseModel):
    id: int
    date: dt.date
    name: str | None = None
    duration_minutes: int | None = None
    notes: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def display_name(self) -> str:
        return self.name or UNTITLED_WORKOUT


# Nested view handed to the dashboard: workout -> exercises -> sets
class SetEntry(BaseModel):
    id: int
    set_number: int
    weight: float | None = None
    reps: int
    rpe: int | None = None
    is_bodyweight: bool = False


class ExerciseEntry(BaseModel):
    id: int
    workout_exercise_id: int
    name: str
    order: int | None = None
    sets: list[SetEntry] = Field(default_factory=list)


class WorkoutDetail(BaseModel):
    id: int
    name: str | None = None
    date: dt.date
    duration_minutes: int | None = None
    notes: str | None = None
    exercises: list[ExerciseEntry] = Field(default_factory=list)

    @computed_field
    @property
    def display_name(self) -> str:
        return self.name or UNTITLED_WORKOUT
