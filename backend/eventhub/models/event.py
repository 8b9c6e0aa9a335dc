"""Event ORM model."""
from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from eventhub.database import Base
from eventhub.models.types import UTCDateTime, new_id, utcnow


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="valid_time_range"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    organizer_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    location = Column(String(500), nullable=False)
    start_time = Column(UTCDateTime, nullable=False, index=True)
    end_time = Column(UTCDateTime, nullable=False)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow)

    organizer = relationship("Profile", back_populates="events")
    rsvps = relationship("RSVP", back_populates="event", cascade="all, delete")
    reviews = relationship(
        "Review", back_populates="event", cascade="all, delete",
        order_by="Review.created_at",
    )
