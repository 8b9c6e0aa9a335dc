"""Pydantic schemas for Events."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from eventhub.schemas.profile import ProfileRef
from eventhub.schemas.review import ReviewWithAuthor
from eventhub.schemas.rsvp import RSVPOut


class EventCreate(BaseModel):
    title: str
    description: str
    location: str
    start_time: datetime
    end_time: datetime
    is_public: bool = True


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_public: Optional[bool] = None


class EventOut(BaseModel):
    id: str
    title: str
    description: str
    organizer_id: str
    location: str
    start_time: datetime
    end_time: datetime
    is_public: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventDetail(EventOut):
    organizer: ProfileRef
    rsvps: list[RSVPOut] = []
    reviews: list[ReviewWithAuthor] = []


class EventSummary(BaseModel):
    id: str
    title: str
    description: str
    location: str
    start_time: datetime
    end_time: datetime
    organizer_id: str
    organizer_name: str
    rsvp_count: int
