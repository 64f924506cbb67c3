"""Activity statistics schemas."""

import datetime as dt

from pydantic import BaseModel


class HeatmapBucket(BaseModel):
    """Number of posts on one calendar day."""

    date: dt.date
    count: int


class WorkoutStat(BaseModel):
    type: str
    subtype: str
    count: int
