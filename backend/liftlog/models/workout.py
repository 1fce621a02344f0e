import datetime as dt
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, Text, Date, DateTime, Index, CheckConstraint, func
from liftlog.db import Base

UNTITLED_WORKOUT = "Untitled Workout"

class Workout(Base):
    __tablename__ = "workouts"
    __table_args__ = (
        CheckConstraint(
            "duration_minutes IS NULL OR duration_minutes > 0", name="workouts_duration_minutes_check"
        ),
        Index("workouts_user_id_idx", "user_id"),
        Index("workouts_user_id_date_idx", "user_id", "date"),
        Index("workouts_date_idx", "date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # opaque id from the identity provider
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    workout_exercises = relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WorkoutExercise.order",
    )

    @property
    def display_name(self) -> str:
        return self.name or UNTITLED_WORKOUT
