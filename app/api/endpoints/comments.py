"""Comment create / delete."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.session import get_db
from app.models.post import Comment, Post
from app.models.user import User
from app.schemas.post import CommentCreate, CommentRead, MessageRead

router = APIRouter()


@router.post("", response_model=CommentRead, status_code=201)
async def create_comment(
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if payload.post_id is None or not (payload.content or "").strip():
        raise HTTPException(status_code=400, detail="post_id and content are required.")
    if await db.get(Post, payload.post_id) is None:
        raise HTTPException(status_code=404, detail="Post not found.")
    comment = Comment(post_id=payload.post_id, author=current_user, content=payload.content)
    db.add(comment)
    await db.flush()
    return comment


@router.delete("/{comment_id}", response_model=MessageRead)
async def delete_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a comment. Only its author may do it."""
    comment = await db.get(Comment, comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found.")
    if comment.author_id != current_user.id:
        raise HTTPException(status_code=401, detail="You can only delete your own comments.")
    await db.delete(comment)
    return MessageRead(message="Comment deleted successfully.")
