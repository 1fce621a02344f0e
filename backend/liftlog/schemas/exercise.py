from datetime import datetime
from typing import Annotated
from pydantic import BaseModel, Field, StringConstraints

ExerciseName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]

class ExerciseCreate(BaseModel):
    name: ExerciseName
    description: Annotated[str, Field(max_length=1000)] | None = None

class ExerciseRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
