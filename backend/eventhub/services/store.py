"""Entity store helpers.

Every write path goes through ``commit`` so constraint failures are turned
into ``ConstraintViolation`` with the session rolled back, and through
``touch`` so ``updated_at`` is owned by the store rather than the caller.
"""
import logging
from datetime import timedelta
from typing import Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eventhub.database import Base
from eventhub.errors import ConstraintViolation, NotFound
from eventhub.models.types import utcnow

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)

# Constraint names as declared on the tables, mapped to readable rules.
_RULES = {
    "uq_rsvps_event_user": "unique_rsvp",
    "rsvps.event_id, rsvps.user_id": "unique_rsvp",
    "uq_reviews_event_user": "unique_review",
    "reviews.event_id, reviews.user_id": "unique_review",
    "valid_time_range": "valid_time_range",
    "valid_rating": "valid_rating",
    "profiles.id": "unique_profile",
    "profiles_pkey": "unique_profile",
    "FOREIGN KEY": "foreign_key",
    "foreign key": "foreign_key",
}


def _rule_for(exc: IntegrityError, default: str) -> str:
    text = str(exc.orig)
    for marker, rule in _RULES.items():
        if marker in text:
            return rule
    return default


def commit(db: Session, rule: str = "integrity") -> None:
    """Commit the unit of work atomically.

    On an integrity failure nothing is written and ``ConstraintViolation`` is
    raised naming the violated rule (``rule`` is used when the backend message
    does not identify one).
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        violated = _rule_for(exc, rule)
        logger.warning("Write rejected by constraint %s: %s", violated, exc.orig)
        raise ConstraintViolation(violated, f"Write violates {violated}") from exc


def touch(row) -> None:
    """Stamp ``updated_at``; successive stamps on one row strictly increase."""
    now = utcnow()
    previous = row.updated_at
    if previous is not None and now <= previous:
        now = previous + timedelta(microseconds=1)
    row.updated_at = now


def get_or_404(db: Session, model: Type[ModelType], entity_id: str) -> ModelType:
    row = db.get(model, entity_id)
    if row is None:
        raise NotFound(model.__name__, entity_id)
    return row
