"""ORM models - import all so Base.metadata is complete for migrations."""

from app.models.exercise import Exercise
from app.models.post import Comment, Image, Like, Post
from app.models.user import Follow, User
from app.models.workout import Workout

__all__ = [
    "Comment",
    "Exercise",
    "Follow",
    "Image",
    "Like",
    "Post",
    "User",
    "Workout",
]
