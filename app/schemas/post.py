"""Post, workout, image, comment and like schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AuthorRef(BaseModel):
    """Minimal user info embedded in posts, comments and likes."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


# ── Workouts ─────────────────────────────────────────────────────────────

class ExerciseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    sets: int | None = Field(None, ge=0)
    reps: int | None = Field(None, ge=0)
    distance: float | None = Field(None, ge=0)
    pace: float | None = Field(None, ge=0)
    weight: float | None = Field(None, ge=0)
    duration: float | None = Field(None, ge=0)


class ExerciseRead(ExerciseCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int


class WorkoutCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=50)
    subtype: str | None = Field(None, max_length=50)
    exercises: list[ExerciseCreate] = []


class WorkoutRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    subtype: str | None = None
    exercises: list[ExerciseRead] = []


# ── Post children ────────────────────────────────────────────────────────

class ImageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    path: str


class CommentCreate(BaseModel):
    post_id: int | None = None
    content: str | None = None


class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    content: str
    timestamp: datetime
    author: AuthorRef


class LikeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    timestamp: datetime
    author: AuthorRef


# ── Post ─────────────────────────────────────────────────────────────────

class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    location: str | None = None
    timestamp: datetime
    author: AuthorRef
    workouts: list[WorkoutRead] = []
    images: list[ImageRead] = []
    comments: list[CommentRead] = []
    likes: list[LikeRead] = []


class MessageRead(BaseModel):
    message: str
