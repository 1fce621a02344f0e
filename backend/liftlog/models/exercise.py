from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, Text, DateTime, Index, CheckConstraint, func
from liftlog.db import Base

class Exercise(Base):
    """Global catalog entry; shared by every user, never owned."""
    __tablename__ = "exercises"
    __table_args__ = (
        CheckConstraint("length(trim(name)) > 0", name="exercises_name_check"),
        Index("exercises_name_idx", "name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # no cascade: workout_exercises.exercise_id is ON DELETE RESTRICT
    workout_exercises = relationship("WorkoutExercise", back_populates="exercise", passive_deletes="all")


# one catalog row per name, case-insensitively
Index("exercises_name_lower_key", func.lower(Exercise.name), unique=True)
