"""Likes on a post. A user can like a post at most once."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.deps import get_current_user
from app.db.session import get_db
from app.models.post import Like, Post
from app.models.user import User
from app.schemas.post import LikeRead, MessageRead

logger = logging.getLogger(__name__)
router = APIRouter()


async def _require_post(db: AsyncSession, post_id: int) -> Post:
    post = await db.get(Post, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found.")
    return post


async def _find_like(db: AsyncSession, post_id: int, author_id: int) -> Like | None:
    result = await db.execute(
        select(Like).where(Like.post_id == post_id, Like.author_id == author_id)
    )
    return result.scalar_one_or_none()


@router.get("", response_model=list[LikeRead])
async def list_likes(post_id: int, db: AsyncSession = Depends(get_db)):
    await _require_post(db, post_id)
    result = await db.execute(
        select(Like)
        .where(Like.post_id == post_id)
        .options(selectinload(Like.author))
        .order_by(Like.timestamp, Like.id)
    )
    return list(result.scalars().all())


@router.post("", response_model=LikeRead, status_code=201)
async def like_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _require_post(db, post_id)
    if await _find_like(db, post_id, current_user.id):
        raise HTTPException(status_code=400, detail="You have already liked this post.")
    like = Like(post_id=post_id, author=current_user)
    db.add(like)
    try:
        await db.flush()
    except IntegrityError as e:
        logger.info("Duplicate like rejected at flush: %s", e.orig)
        raise HTTPException(status_code=400, detail="You have already liked this post.")
    return like


@router.delete("", response_model=MessageRead)
async def unlike_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    like = await _find_like(db, post_id, current_user.id)
    if not like:
        raise HTTPException(status_code=404, detail="Like not found.")
    await db.delete(like)
    return MessageRead(message="Like removed successfully.")
