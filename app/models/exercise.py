"""Exercise model - one entry inside a workout."""

from __future__ import annotations

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class Exercise(Base):
    """Named exercise. Which numeric fields are filled depends on the kind of exercise:
    sets/reps/weight for lifts, distance/pace/duration for cardio."""

    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    workout_id: Mapped[int] = mapped_column(
        ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    distance: Mapped[float | None] = mapped_column(Float, nullable=True)  # km
    pace: Mapped[float | None] = mapped_column(Float, nullable=True)  # min/km
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)  # kg
    duration: Mapped[float | None] = mapped_column(Float, nullable=True)  # minutes

    workout: Mapped["Workout"] = relationship("Workout", back_populates="exercises")
