"""Lifecycle rules: input checks, time ordering and review eligibility.

These run before anything touches the store, so a rejected request never
produces a partial write.
"""
from datetime import datetime
from typing import Optional

from eventhub.errors import IneligibleReview, InvalidTimeRange, ValidationError
from eventhub.models.review import MAX_RATING, MIN_RATING
from eventhub.models.rsvp import RSVPStatus
from eventhub.models.types import as_utc, utcnow

TITLE_MAX = 200
DESCRIPTION_MAX = 2000
EVENT_LOCATION_MAX = 500
FULL_NAME_MAX = 100
BIO_MAX = 500
PROFILE_LOCATION_MAX = 200
PICTURE_MAX = 1000
COMMENT_MAX = 1000


def required_text(field: str, value: Optional[str], max_length: int) -> str:
    """Trimmed, non-empty text no longer than ``max_length``."""
    if value is None or not isinstance(value, str):
        raise ValidationError(field, f"{field} is required")
    value = value.strip()
    if not value:
        raise ValidationError(field, f"{field} must not be empty")
    if len(value) > max_length:
        raise ValidationError(field, f"{field} must be at most {max_length} characters")
    return value


def optional_text(field: str, value: Optional[str], max_length: int) -> Optional[str]:
    """Trimmed text or None; blank input is stored as None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(field, f"{field} must be text")
    value = value.strip()
    if not value:
        return None
    if len(value) > max_length:
        raise ValidationError(field, f"{field} must be at most {max_length} characters")
    return value


def validate_rating(rating) -> int:
    # bool is an int subclass; True is not a rating.
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("rating", "rating must be an integer")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError("rating", f"rating must be between {MIN_RATING} and {MAX_RATING}")
    return rating


def validate_status(status) -> RSVPStatus:
    try:
        return RSVPStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in RSVPStatus)
        raise ValidationError("status", f"status must be one of: {allowed}") from None


def check_time_range(start_time: datetime, end_time: datetime) -> tuple[datetime, datetime]:
    """Return both times in UTC, or raise InvalidTimeRange unless end > start."""
    if start_time is None:
        raise ValidationError("start_time", "start_time is required")
    if end_time is None:
        raise ValidationError("end_time", "end_time is required")
    start_time, end_time = as_utc(start_time), as_utc(end_time)
    if end_time <= start_time:
        raise InvalidTimeRange(start_time, end_time)
    return start_time, end_time


def has_ended(event, now: Optional[datetime] = None) -> bool:
    return as_utc(event.end_time) < (now or utcnow())


def check_review_window(event, now: Optional[datetime] = None) -> None:
    if not has_ended(event, now):
        raise IneligibleReview(event.id, as_utc(event.end_time))
