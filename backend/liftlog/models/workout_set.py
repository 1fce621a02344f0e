from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, ForeignKey, Text, Boolean, Numeric, DateTime, Index, CheckConstraint, func, false
from liftlog.db import Base

class WorkoutSet(Base):
    __tablename__ = "sets"
    __table_args__ = (
        CheckConstraint("rpe IS NULL OR (rpe >= 1 AND rpe <= 10)", name="sets_rpe_check"),
        CheckConstraint("reps > 0", name="sets_reps_check"),
        CheckConstraint("weight IS NULL OR weight >= 0", name="sets_weight_check"),
        CheckConstraint("set_number > 0", name="sets_set_number_check"),
        Index("sets_workout_exercise_id_idx", "workout_exercise_id"),
        Index("sets_workout_exercise_id_set_number_idx", "workout_exercise_id", "set_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    workout_exercise_id: Mapped[int] = mapped_column(
        ForeignKey("workout_exercises.id", ondelete="CASCADE"), nullable=False
    )
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    # a bodyweight set may still carry added load in `weight`
    is_bodyweight: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    weight: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    rpe: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    workout_exercise = relationship("WorkoutExercise", back_populates="sets")
