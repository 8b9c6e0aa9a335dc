"""Aggregation service: attendance counts, rating averages and trends.

Everything is computed from the authoritative rows at query time. Each
aggregate is a single SELECT, so the rows it scans come from one read instant.
Rows belonging to events the caller may not see never enter a computation.
"""
import enum
import logging
from collections import Counter
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple, Optional, Union

import pytz
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from eventhub.config import settings
from eventhub.errors import ValidationError
from eventhub.identity import Identity
from eventhub.models.event import Event
from eventhub.models.review import Review
from eventhub.models.rsvp import RSVP, RSVPStatus
from eventhub.services.event_service import get_visible_event

logger = logging.getLogger(__name__)

# Returned by average_rating when an event has no reviews.
NO_DATA = None

_ONE_PLACE = Decimal("0.1")


class TrendMetric(str, enum.Enum):
    events = "events"
    rsvps = "rsvps"


class TrendBucket(NamedTuple):
    bucket_date: date
    count: int


def attendance_counts(db: Session, identity: Identity, event_id: str) -> dict[str, int]:
    """Number of RSVPs per status; statuses nobody picked report 0."""
    get_visible_event(db, identity, event_id)
    rows = db.execute(
        select(RSVP.status, func.count(RSVP.id))
        .where(RSVP.event_id == event_id)
        .group_by(RSVP.status)
    ).all()
    counts = {status.value: 0 for status in RSVPStatus}
    for status, n in rows:
        counts[RSVPStatus(status).value] = n
    return counts


def _rating_totals(db: Session, event_id: str) -> tuple[int, int]:
    count, total = db.execute(
        select(func.count(Review.id), func.coalesce(func.sum(Review.rating), 0))
        .where(Review.event_id == event_id)
    ).one()
    return count, total


def _mean(count: int, total: int) -> Optional[Decimal]:
    if count == 0:
        return NO_DATA
    return (Decimal(total) / Decimal(count)).quantize(_ONE_PLACE, rounding=ROUND_HALF_UP)


def average_rating(db: Session, identity: Identity, event_id: str) -> Optional[Decimal]:
    """Mean rating rounded to one decimal place, or NO_DATA without reviews."""
    get_visible_event(db, identity, event_id)
    return _mean(*_rating_totals(db, event_id))


def event_stats(db: Session, identity: Identity, event_id: str) -> dict:
    """Attendance and rating summary for the event detail view."""
    counts = attendance_counts(db, identity, event_id)
    review_count, total = _rating_totals(db, event_id)
    return {
        "event_id": event_id,
        "attendance": counts,
        "average_rating": _mean(review_count, total),
        "review_count": review_count,
    }


def _parse_date(field: str, value: Union[date, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(field, f"{field} must be an ISO date (YYYY-MM-DD)") from None


def _visible_to(identity: Identity):
    if identity.is_anonymous:
        return Event.is_public.is_(True)
    return or_(Event.is_public.is_(True), Event.organizer_id == identity.user_id)


def trends(
    db: Session,
    identity: Identity,
    start_date: Union[date, str],
    end_date: Union[date, str],
    metric: Union[TrendMetric, str] = TrendMetric.events,
) -> list[TrendBucket]:
    """Daily activity between two dates, both inclusive, with no gaps.

    ``events`` buckets events by start time; ``rsvps`` buckets RSVPs by the
    time they were created. Days are taken in the TRENDS_TIMEZONE zone.
    """
    start_date = _parse_date("start_date", start_date)
    end_date = _parse_date("end_date", end_date)
    if end_date < start_date:
        raise ValidationError("end_date", "end_date must not be before start_date")
    days = (end_date - start_date).days + 1
    if days > settings.TRENDS_MAX_DAYS:
        raise ValidationError("end_date", f"range must not exceed {settings.TRENDS_MAX_DAYS} days")
    try:
        metric = TrendMetric(metric)
    except ValueError:
        raise ValidationError("metric", "metric must be 'events' or 'rsvps'") from None

    tz = pytz.timezone(settings.TRENDS_TIMEZONE)
    range_start = tz.localize(datetime.combine(start_date, time.min)).astimezone(pytz.utc)
    range_end = tz.localize(
        datetime.combine(end_date + timedelta(days=1), time.min)
    ).astimezone(pytz.utc)

    if metric == TrendMetric.events:
        column = Event.start_time
        query = select(column)
    else:
        column = RSVP.created_at
        query = select(column).join(Event, Event.id == RSVP.event_id)
    query = query.where(_visible_to(identity), column >= range_start, column < range_end)

    per_day = Counter(ts.astimezone(tz).date() for ts in db.execute(query).scalars())
    logger.debug("Trend %s for %s..%s: %d rows", metric.value, start_date, end_date, sum(per_day.values()))
    return [
        TrendBucket(day, per_day.get(day, 0))
        for day in (start_date + timedelta(days=i) for i in range(days))
    ]
