"""Pydantic schemas for Reviews."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from eventhub.schemas.profile import ProfileRef


class ReviewCreate(BaseModel):
    rating: int
    comment: str


class ReviewUpdate(BaseModel):
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewOut(BaseModel):
    id: str
    event_id: str
    user_id: str
    rating: int
    comment: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ReviewWithAuthor(ReviewOut):
    user: ProfileRef
