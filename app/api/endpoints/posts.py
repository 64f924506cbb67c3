"""Post create / read / delete. Creation is multipart: form fields plus image files."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.deps import get_current_user
from app.core.config import get_settings
from app.db.session import get_db
from app.models.exercise import Exercise
from app.models.post import Comment, Image, Post
from app.models.user import User
from app.models.workout import Workout
from app.schemas.post import CommentRead, MessageRead, PostRead, WorkoutCreate
from app.services.feed import load_post
from app.services.uploads import discard_uploads, save_uploads

logger = logging.getLogger(__name__)
router = APIRouter()

_workouts_adapter = TypeAdapter(list[WorkoutCreate])


def parse_workouts(raw: str | None) -> list[WorkoutCreate]:
    """Decode the `workouts` form field (a JSON array). Raises 400 on bad input."""
    if raw is None or not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Workouts must be a JSON array.")
    try:
        return _workouts_adapter.validate_python(data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid workouts: {e.errors()[0]['msg']}")


@router.post("", response_model=PostRead, status_code=201)
async def create_post(
    content: str | None = Form(None),
    location: str | None = Form(None),
    workouts: str | None = Form(None),
    images: list[UploadFile] | None = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a post with nested workouts/exercises and uploaded images.
    Rows are committed together; stored files are removed if the write or commit fails.
    """
    settings = get_settings()
    if not content or not content.strip():
        raise HTTPException(status_code=400, detail="Content is required.")
    workout_items = parse_workouts(workouts)
    files = [f for f in (images or []) if f.filename]
    if len(files) > settings.max_images_per_post:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.max_images_per_post} images per post.",
        )

    paths = await save_uploads(files, settings)
    try:
        post = Post(
            author=current_user,
            content=content,
            location=location or None,
            images=[Image(path=p) for p in paths],
            workouts=[
                Workout(
                    type=w.type,
                    subtype=w.subtype,
                    exercises=[Exercise(**e.model_dump()) for e in w.exercises],
                )
                for w in workout_items
            ],
        )
        db.add(post)
        await db.flush()
        await db.commit()
    except Exception:
        if paths:
            logger.warning("Post create failed, removing %d stored file(s)", len(paths))
        discard_uploads(paths, settings)
        raise
    return await load_post(db, post.id)


@router.get("/{post_id}", response_model=PostRead)
async def get_post(post_id: int, db: AsyncSession = Depends(get_db)):
    """Single post with author, workouts, images, comments and likes."""
    post = await load_post(db, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found.")
    return post


@router.delete("/{post_id}", response_model=MessageRead)
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a post, its children and its image files. Author only."""
    result = await db.execute(
        select(Post).where(Post.id == post_id).options(selectinload(Post.images))
    )
    post = result.scalar_one_or_none()
    if not post:
        raise HTTPException(status_code=404, detail="Post not found.")
    if post.author_id != current_user.id:
        raise HTTPException(status_code=401, detail="You can only delete your own posts.")
    paths = [image.path for image in post.images]
    await db.delete(post)
    await db.commit()
    discard_uploads(paths)
    return MessageRead(message="Post and associated data deleted successfully.")


@router.get("/{post_id}/comments", response_model=list[CommentRead])
async def list_comments(post_id: int, db: AsyncSession = Depends(get_db)):
    """Comments on a post, oldest first."""
    if await db.get(Post, post_id) is None:
        raise HTTPException(status_code=404, detail="Post not found.")
    result = await db.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .options(selectinload(Comment.author))
        .order_by(Comment.timestamp, Comment.id)
    )
    return list(result.scalars().all())
