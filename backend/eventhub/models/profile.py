"""Profile ORM model."""
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from eventhub.database import Base
from eventhub.models.types import UTCDateTime, utcnow


class Profile(Base):
    __tablename__ = "profiles"

    # Same key as the external account, never generated here.
    id = Column(String(36), primary_key=True)
    full_name = Column(String(100), nullable=False)
    bio = Column(Text, nullable=True)
    location = Column(String(200), nullable=True)
    profile_picture = Column(String(1000), nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow)

    events = relationship("Event", back_populates="organizer", cascade="all, delete")
    rsvps = relationship("RSVP", back_populates="user", cascade="all, delete")
    reviews = relationship("Review", back_populates="user", cascade="all, delete")
