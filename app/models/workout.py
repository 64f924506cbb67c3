"""Workout model - a session nested under a post."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class Workout(Base):
    """A workout of a given type (run, lift, ...) with an optional subtype (interval, bench, ...)."""

    __tablename__ = "workouts"
    __table_args__ = (Index("ix_workouts_type_subtype", "type", "subtype"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    subtype: Mapped[str | None] = mapped_column(String(50), nullable=True)

    post: Mapped["Post"] = relationship("Post", back_populates="workouts")
    exercises: Mapped[list["Exercise"]] = relationship(
        "Exercise", back_populates="workout", cascade="all, delete-orphan", order_by="Exercise.id"
    )
