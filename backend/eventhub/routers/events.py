"""Event API routes: delegates to the services for invariant enforcement."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.identity import Identity, get_identity
from eventhub.schemas.event import EventCreate, EventDetail, EventOut, EventSummary, EventUpdate
from eventhub.schemas.review import ReviewCreate, ReviewOut
from eventhub.schemas.rsvp import RSVPOut, RSVPPayload
from eventhub.services import event_service, review_service, rsvp_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Create an event organized by the caller."""
    return event_service.create_event(
        db,
        identity,
        title=payload.title,
        description=payload.description,
        location=payload.location,
        start_time=payload.start_time,
        end_time=payload.end_time,
        is_public=payload.is_public,
    )


@router.get("/", response_model=list[EventSummary])
def list_events(q: Optional[str] = Query(None, description="Matches title, description or location"),
                db: Session = Depends(get_db)):
    """Public upcoming events, soonest first."""
    return event_service.list_public_upcoming_events(db, filter_text=q)


@router.get("/{event_id}", response_model=EventDetail)
def get_event(event_id: str, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    """Fetch a single event with organizer, RSVPs and reviews."""
    return event_service.get_event(db, identity, event_id)


@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Update an event (organizer only)."""
    return event_service.update_event(db, identity, event_id, payload.model_dump(exclude_unset=True))


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    event_service.delete_event(db, identity, event_id)


@router.put("/{event_id}/rsvp", response_model=RSVPOut)
def set_rsvp(
    event_id: str,
    payload: RSVPPayload,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Set or change the caller's RSVP."""
    return rsvp_service.upsert_rsvp(db, identity, event_id, payload.status)


@router.get("/{event_id}/rsvp", response_model=Optional[RSVPOut])
def get_my_rsvp(event_id: str, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    return rsvp_service.get_my_rsvp(db, identity, event_id)


@router.delete("/{event_id}/rsvp", status_code=status.HTTP_204_NO_CONTENT)
def delete_rsvp(event_id: str, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    rsvp_service.delete_rsvp(db, identity, event_id)


@router.post("/{event_id}/reviews", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def submit_review(
    event_id: str,
    payload: ReviewCreate,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Review an event once it has ended."""
    return review_service.submit_review(db, identity, event_id, payload.rating, payload.comment)
