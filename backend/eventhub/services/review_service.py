"""Review service: post-event ratings, one per user per event."""
import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from eventhub.errors import ConstraintViolation, DuplicateReview, ValidationError
from eventhub.identity import Identity
from eventhub.models.review import Review
from eventhub.services import lifecycle, store
from eventhub.services.authorization import EntityKind, Operation, authorize
from eventhub.services.event_service import get_visible_event

logger = logging.getLogger(__name__)


def find_review(db: Session, event_id: str, user_id: str) -> Optional[Review]:
    return db.execute(
        select(Review).where(Review.event_id == event_id, Review.user_id == user_id)
    ).scalar_one_or_none()


def submit_review(db: Session, identity: Identity, event_id: str, rating: int, comment: str) -> Review:
    """Record the caller's review of an event that has already ended."""
    rating = lifecycle.validate_rating(rating)
    comment = lifecycle.required_text("comment", comment, lifecycle.COMMENT_MAX)

    event = get_visible_event(db, identity, event_id)
    review = Review(event_id=event_id, user_id=identity.user_id, rating=rating, comment=comment)
    authorize(identity, EntityKind.review, Operation.insert, review)
    lifecycle.check_review_window(event)

    if find_review(db, event_id, identity.user_id) is not None:
        logger.warning("Duplicate review by %s for event %s", identity.user_id, event_id)
        raise DuplicateReview(event_id, identity.user_id)

    db.add(review)
    try:
        store.commit(db, rule="unique_review")
    except ConstraintViolation as exc:
        if exc.rule == "unique_review":
            raise DuplicateReview(event_id, identity.user_id) from exc
        raise
    db.refresh(review)
    logger.info("User %s reviewed event %s with rating %d", identity.user_id, event_id, rating)
    return review


def get_review(db: Session, review_id: str) -> Review:
    return store.get_or_404(db, Review, review_id)


def update_review(db: Session, identity: Identity, review_id: str, updates: dict[str, Any]) -> Review:
    """Author-only edit of rating and/or comment."""
    review = store.get_or_404(db, Review, review_id)
    authorize(identity, EntityKind.review, Operation.update, review)

    unknown = set(updates) - {"rating", "comment"}
    if unknown:
        raise ValidationError(sorted(unknown)[0], "field cannot be updated")
    cleaned = {}
    if "rating" in updates:
        cleaned["rating"] = lifecycle.validate_rating(updates["rating"])
    if "comment" in updates:
        cleaned["comment"] = lifecycle.required_text("comment", updates["comment"], lifecycle.COMMENT_MAX)

    for field, value in cleaned.items():
        setattr(review, field, value)
    store.touch(review)
    store.commit(db, rule="valid_rating")
    db.refresh(review)
    logger.info("Updated review %s", review_id)
    return review


def delete_review(db: Session, identity: Identity, review_id: str) -> None:
    review = store.get_or_404(db, Review, review_id)
    authorize(identity, EntityKind.review, Operation.delete, review)
    db.delete(review)
    store.commit(db)
    logger.info("Deleted review %s", review_id)
