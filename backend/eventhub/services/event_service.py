"""Core event service: enforces event invariants and visibility.

Responsibilities:
- Authorization: only the organizer may update or delete; private events are
  visible to their organizer only
- Time ordering: end_time strictly after start_time on create and update
- Organizer is the creating identity and never changes afterwards
- Listing of public upcoming events with free-text filtering
"""
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from eventhub.errors import ConstraintViolation, NotFound, ValidationError
from eventhub.identity import Identity
from eventhub.models.event import Event
from eventhub.models.profile import Profile
from eventhub.models.review import Review
from eventhub.models.rsvp import RSVP
from eventhub.models.types import as_utc, utcnow
from eventhub.services import lifecycle, store
from eventhub.services.authorization import EntityKind, Operation, authorize

logger = logging.getLogger(__name__)

_TEXT_FIELDS = {
    "title": lifecycle.TITLE_MAX,
    "description": lifecycle.DESCRIPTION_MAX,
    "location": lifecycle.EVENT_LOCATION_MAX,
}
_UPDATABLE = set(_TEXT_FIELDS) | {"start_time", "end_time", "is_public"}


def create_event(
    db: Session,
    identity: Identity,
    title: str,
    description: str,
    location: str,
    start_time: datetime,
    end_time: datetime,
    is_public: bool = True,
) -> Event:
    """Create an event organized by the calling identity."""
    authorize(identity, EntityKind.event, Operation.insert, {"organizer_id": identity.user_id})

    values = {field: lifecycle.required_text(field, value, _TEXT_FIELDS[field])
              for field, value in (("title", title), ("description", description), ("location", location))}
    start_time, end_time = lifecycle.check_time_range(start_time, end_time)

    if db.get(Profile, identity.user_id) is None:
        raise ConstraintViolation(
            "foreign_key", "Organizer has no profile", {"organizer_id": identity.user_id}
        )

    event = Event(
        organizer_id=identity.user_id,
        start_time=start_time,
        end_time=end_time,
        is_public=bool(is_public),
        **values,
    )
    db.add(event)
    store.commit(db, rule="valid_time_range")
    db.refresh(event)
    logger.info("Created event '%s' (%s) by organizer %s", event.title, event.id, identity.user_id)
    return event


def get_event(db: Session, identity: Identity, event_id: str) -> Event:
    """Fetch an event with organizer, RSVPs and reviews.

    Missing events raise NotFound; private events looked up by anyone but the
    organizer raise Unauthorized.
    """
    event = db.execute(
        select(Event)
        .where(Event.id == event_id)
        .options(
            selectinload(Event.organizer),
            selectinload(Event.rsvps),
            selectinload(Event.reviews).selectinload(Review.user),
        )
    ).scalar_one_or_none()
    if event is None:
        raise NotFound("Event", event_id)
    authorize(identity, EntityKind.event, Operation.select, event)
    return event


def get_visible_event(db: Session, identity: Identity, event_id: str) -> Event:
    """Plain lookup used by other services; same visibility rules as get_event."""
    event = store.get_or_404(db, Event, event_id)
    authorize(identity, EntityKind.event, Operation.select, event)
    return event


def update_event(db: Session, identity: Identity, event_id: str, updates: dict[str, Any]) -> Event:
    """Partial update by the organizer; the merged times must stay ordered."""
    event = store.get_or_404(db, Event, event_id)
    authorize(identity, EntityKind.event, Operation.update, event)

    if "organizer_id" in updates and updates["organizer_id"] != event.organizer_id:
        raise ValidationError("organizer_id", "organizer cannot be changed")
    unknown = set(updates) - _UPDATABLE - {"organizer_id"}
    if unknown:
        raise ValidationError(sorted(unknown)[0], "field cannot be updated")

    cleaned: dict[str, Any] = {}
    for field, max_length in _TEXT_FIELDS.items():
        if field in updates:
            cleaned[field] = lifecycle.required_text(field, updates[field], max_length)
    if "is_public" in updates:
        if updates["is_public"] is None:
            raise ValidationError("is_public", "is_public is required")
        cleaned["is_public"] = bool(updates["is_public"])
    for field in ("start_time", "end_time"):
        if field in updates and updates[field] is None:
            raise ValidationError(field, f"{field} is required")
    start_time, end_time = lifecycle.check_time_range(
        updates.get("start_time", event.start_time),
        updates.get("end_time", event.end_time),
    )
    cleaned["start_time"], cleaned["end_time"] = start_time, end_time

    for field, value in cleaned.items():
        setattr(event, field, value)
    store.touch(event)
    store.commit(db, rule="valid_time_range")
    db.refresh(event)
    logger.info("Updated event %s", event_id)
    return event


def delete_event(db: Session, identity: Identity, event_id: str) -> None:
    """Delete an event and, by cascade, its RSVPs and reviews."""
    event = store.get_or_404(db, Event, event_id)
    authorize(identity, EntityKind.event, Operation.delete, event)
    db.delete(event)
    store.commit(db)
    logger.info("Deleted event %s", event_id)


def list_public_upcoming_events(
    db: Session,
    filter_text: Optional[str] = None,
    now: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """Public events that have not started yet, soonest first.

    ``filter_text`` matches title, description or location, case-insensitively.
    Each summary carries the organizer's name and the number of RSVPs.
    """
    now = as_utc(now) or utcnow()
    rsvp_count = func.count(RSVP.id).label("rsvp_count")
    query = (
        select(Event, Profile.full_name, rsvp_count)
        .join(Profile, Profile.id == Event.organizer_id)
        .outerjoin(RSVP, RSVP.event_id == Event.id)
        .where(Event.is_public.is_(True), Event.start_time >= now)
        .group_by(Event.id, Profile.full_name)
        .order_by(Event.start_time, Event.id)
    )
    needle = (filter_text or "").strip().lower()
    if needle:
        query = query.where(or_(
            func.lower(Event.title).contains(needle, autoescape=True),
            func.lower(Event.description).contains(needle, autoescape=True),
            func.lower(Event.location).contains(needle, autoescape=True),
        ))

    return [
        {
            "id": event.id,
            "title": event.title,
            "description": event.description,
            "location": event.location,
            "start_time": event.start_time,
            "end_time": event.end_time,
            "organizer_id": event.organizer_id,
            "organizer_name": organizer_name,
            "rsvp_count": count,
        }
        for event, organizer_name, count in db.execute(query).all()
    ]
