from typing import Annotated
from pydantic import BaseModel, Field, ValidationInfo, field_validator

PosInt = Annotated[int, Field(ge=1)]
Weight = Annotated[float, Field(ge=0, le=10000)]
Rpe = Annotated[int, Field(ge=1, le=10)]
NotesStr = Annotated[str, Field(max_length=1000)]

class SetCreate(BaseModel):
    # Optional: if omitted, the server appends after the last set of the exercise
    set_number: PosInt | None = None
    reps: PosInt
    weight: Weight | None = None
    rpe: Rpe | None = None
    is_bodyweight: bool = False
    notes: NotesStr | None = None

class SetUpdate(BaseModel):
    set_number: PosInt | None = None
    reps: PosInt | None = None
    weight: Weight | None = None
    rpe: Rpe | None = None
    is_bodyweight: bool | None = None
    notes: NotesStr | None = None

    @field_validator("set_number", "reps", "is_bodyweight", mode="before")
    @classmethod
    def not_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)

class SetRead(BaseModel):
    id: int
    workout_exercise_id: int
    set_number: int
    reps: int
    weight: float | None = None
    rpe: int | None = None
    is_bodyweight: bool
    notes: str | None = None

    model_config = {"from_attributes": True}
