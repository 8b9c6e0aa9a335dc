"""Pydantic schemas for aggregate views."""
from datetime import date
from typing import Optional

from pydantic import BaseModel


class AttendanceCounts(BaseModel):
    going: int = 0
    maybe: int = 0
    not_going: int = 0


class EventStatsOut(BaseModel):
    event_id: str
    attendance: AttendanceCounts
    # None means there are no reviews yet.
    average_rating: Optional[float] = None
    review_count: int


class TrendBucketOut(BaseModel):
    bucket_date: date
    count: int

    model_config = {"from_attributes": True}
