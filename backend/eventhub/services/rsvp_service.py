"""RSVP service: one attendance answer per user per event."""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from eventhub.errors import NotFound
from eventhub.identity import Identity
from eventhub.models.rsvp import RSVP
from eventhub.services import lifecycle, store
from eventhub.services.authorization import EntityKind, Operation, authorize
from eventhub.services.event_service import get_visible_event

logger = logging.getLogger(__name__)


def find_rsvp(db: Session, event_id: str, user_id: str) -> Optional[RSVP]:
    return db.execute(
        select(RSVP).where(RSVP.event_id == event_id, RSVP.user_id == user_id)
    ).scalar_one_or_none()


def upsert_rsvp(db: Session, identity: Identity, event_id: str, status: str) -> RSVP:
    """Set the caller's RSVP, updating the existing row when there is one.

    Two concurrent first submissions for the same pair leave exactly one row;
    the loser gets ConstraintViolation from the unique constraint.
    """
    status = lifecycle.validate_status(status)
    get_visible_event(db, identity, event_id)

    rsvp = find_rsvp(db, event_id, identity.user_id) if not identity.is_anonymous else None
    if rsvp is not None:
        authorize(identity, EntityKind.rsvp, Operation.update, rsvp)
        if rsvp.status != status:
            rsvp.status = status
        store.touch(rsvp)
        store.commit(db, rule="unique_rsvp")
        db.refresh(rsvp)
        logger.info("User %s changed RSVP to '%s' for event %s", identity.user_id, status.value, event_id)
        return rsvp

    rsvp = RSVP(event_id=event_id, user_id=identity.user_id, status=status)
    authorize(identity, EntityKind.rsvp, Operation.insert, rsvp)
    db.add(rsvp)
    store.commit(db, rule="unique_rsvp")
    db.refresh(rsvp)
    logger.info("User %s RSVP'd '%s' to event %s", identity.user_id, status.value, event_id)
    return rsvp


def get_my_rsvp(db: Session, identity: Identity, event_id: str) -> Optional[RSVP]:
    """The caller's RSVP for a visible event, or None."""
    get_visible_event(db, identity, event_id)
    if identity.is_anonymous:
        return None
    return find_rsvp(db, event_id, identity.user_id)


def delete_rsvp(db: Session, identity: Identity, event_id: str) -> None:
    rsvp = None if identity.is_anonymous else find_rsvp(db, event_id, identity.user_id)
    if rsvp is None:
        raise NotFound("RSVP", event_id)
    authorize(identity, EntityKind.rsvp, Operation.delete, rsvp)
    db.delete(rsvp)
    store.commit(db)
    logger.info("User %s withdrew RSVP for event %s", identity.user_id, event_id)
