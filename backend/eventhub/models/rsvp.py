"""RSVP ORM model."""
import enum

from sqlalchemy import Column, Enum as SAEnum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from eventhub.database import Base
from eventhub.models.types import UTCDateTime, new_id, utcnow


class RSVPStatus(str, enum.Enum):
    going = "going"
    maybe = "maybe"
    not_going = "not_going"


class RSVP(Base):
    __tablename__ = "rsvps"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_rsvps_event_user"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    status = Column(SAEnum(RSVPStatus, name="rsvp_status"), nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow)

    event = relationship("Event", back_populates="rsvps")
    user = relationship("Profile", back_populates="rsvps")
