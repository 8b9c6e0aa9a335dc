"""Pydantic schemas for RSVPs."""
from datetime import datetime

from pydantic import BaseModel

from eventhub.models.rsvp import RSVPStatus


class RSVPPayload(BaseModel):
    status: str  # going, maybe, not_going


class RSVPOut(BaseModel):
    id: str
    event_id: str
    user_id: str
    status: RSVPStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
