"""User, auth and profile schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.post import AuthorRef, PostRead


class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=72)
    height: float | None = Field(None, gt=0, description="Height in cm")
    weight: float | None = Field(None, gt=0, description="Weight in kg")
    body_fat: float | None = Field(None, ge=0, le=100, description="Body fat %")


class UserRename(BaseModel):
    username: str | None = Field(None, max_length=50)


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str
    height: float | None = None
    weight: float | None = None
    body_fat: float | None = None
    created_at: datetime


class UserProfile(UserRead):
    """Profile page: user, their posts (newest first) and follow lists as usernames."""

    posts: list[PostRead] = []
    following: list[str] = []
    followers: list[str] = []


class SignIn(BaseModel):
    # Optional so a missing field is reported as 400 rather than 422
    username: str | None = None
    password: str | None = None


class TokenRead(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class FollowRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    follower: AuthorRef
    followee: AuthorRef
    created_at: datetime
