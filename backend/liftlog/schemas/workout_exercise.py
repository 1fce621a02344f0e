from datetime import datetime
from typing import Annotated
from pydantic import BaseModel, Field, field_validator, model_validator

from liftlog.schemas.exercise import ExerciseName

Order = Annotated[int, Field(ge=0)]
NotesStr = Annotated[str, Field(max_length=1000)]

class WorkoutExerciseCreate(BaseModel):
    # Either an existing catalog id, or a name that is looked up / created on first use
    exercise_id: Annotated[int, Field(ge=1)] | None = None
    exercise_name: ExerciseName | None = None
    order: Order = 0
    notes: NotesStr | None = None

    @model_validator(mode="after")
    def exactly_one_exercise_ref(self):
        if (self.exercise_id is None) == (self.exercise_name is None):
            raise ValueError("provide exactly one of exercise_id or exercise_name")
        return self

class WorkoutExerciseUpdate(BaseModel):
    order: Order | None = None
    notes: NotesStr | None = None

    @field_validator("order", mode="before")
    @classmethod
    def order_not_null(cls, v):
        if v is None:
            raise ValueError("order cannot be null")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)

class WorkoutExerciseRead(BaseModel):
    id: int
    workout_id: int
    exercise_id: int
    order: int
    notes: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
