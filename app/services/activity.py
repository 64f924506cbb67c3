"""Per-user activity aggregates: posting heatmap and workout type counts."""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timezone
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import OTHER_SUBTYPE_LABEL
from app.models.post import Post
from app.models.workout import Workout


def bucket_by_day(timestamps: Iterable[datetime]) -> list[dict]:
    """Group timestamps by calendar day (UTC): [{"date", "count"}] ordered by date."""
    counts: Counter[date] = Counter()
    for ts in timestamps:
        if ts.tzinfo is not None:
            ts = ts.astimezone(timezone.utc)
        counts[ts.date()] += 1
    return [{"date": d, "count": n} for d, n in sorted(counts.items())]


def merge_workout_counts(rows: Iterable[tuple[str, str | None, int]]) -> list[dict]:
    """Fold (type, subtype, count) rows; a missing subtype is reported as "Other"."""
    counts: Counter[tuple[str, str]] = Counter()
    for workout_type, subtype, n in rows:
        counts[(workout_type, subtype or OTHER_SUBTYPE_LABEL)] += n
    return [{"type": t, "subtype": s, "count": n} for (t, s), n in counts.items()]


async def post_heatmap(db: AsyncSession, author_id: int, year: int) -> list[dict]:
    """Per-day post counts for one calendar year."""
    start = datetime(year, 1, 1, tzinfo=timezone.utc)
    end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    result = await db.execute(
        select(Post.timestamp).where(
            Post.author_id == author_id,
            Post.timestamp >= start,
            Post.timestamp < end,
        )
    )
    return bucket_by_day(result.scalars().all())


async def workout_stats(db: AsyncSession, author_id: int) -> list[dict]:
    """Workout counts by (type, subtype) across all of the user's posts."""
    result = await db.execute(
        select(Workout.type, Workout.subtype, func.count(Workout.id))
        .join(Post, Post.id == Workout.post_id)
        .where(Post.author_id == author_id)
        .group_by(Workout.type, Workout.subtype)
    )
    return merge_workout_counts(result.all())
