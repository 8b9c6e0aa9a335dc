"""Aggregate statistics routes."""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.identity import Identity, get_identity
from eventhub.schemas.stats import EventStatsOut, TrendBucketOut
from eventhub.services import aggregation_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/events/{event_id}", response_model=EventStatsOut)
def event_stats(event_id: str, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    """Attendance per status and average rating for one event."""
    return aggregation_service.event_stats(db, identity, event_id)


@router.get("/trends", response_model=list[TrendBucketOut])
def trends(
    start_date: str = Query(..., description="YYYY-MM-DD, inclusive"),
    end_date: str = Query(..., description="YYYY-MM-DD, inclusive"),
    metric: str = Query("events", description="events or rsvps"),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Daily counts across the range, zero-filled."""
    buckets = aggregation_service.trends(db, identity, start_date, end_date, metric)
    return [TrendBucketOut(bucket_date=b.bucket_date, count=b.count) for b in buckets]
