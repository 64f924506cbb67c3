"""API router aggregation."""

from fastapi import APIRouter

from app.api.endpoints import auth, comments, feed, follows, health, likes, posts, users

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(likes.router, prefix="/posts/{post_id}/likes", tags=["likes"])
api_router.include_router(comments.router, prefix="/comments", tags=["comments"])
api_router.include_router(follows.router, prefix="/follow", tags=["follows"])
api_router.include_router(feed.router, prefix="/feed", tags=["feed"])
