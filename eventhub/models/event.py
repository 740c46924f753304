# Event model - hosted events, their tags and attendees (with ratings)

import uuid

from sqlalchemy import Column, String, Float, DateTime, SmallInteger, ForeignKey, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from eventhub.core.database import Base, one_of
from .tag import event_tags

EVENT_STATUSES = ("scheduled", "active", "completed")
ATTENDEE_STATUSES = ("interested", "attending", "left", "banned")


class Event(Base):
    """Event hosted by a user at a location"""

    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint(one_of("status", EVENT_STATUSES), name="ck_event_status"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(64), nullable=False)

    # Event status: scheduled, active, completed
    status = Column(String(16), nullable=False, default="scheduled", index=True)

    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)

    start_date_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    end_date_time = Column(DateTime(timezone=True), nullable=True)  # NULL -> open end

    description = Column(String(1000), nullable=False, default="No Description")

    host_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    tags = relationship("Tag", secondary=event_tags, lazy="selectin")
    attendees = relationship("EventAttendee", back_populates="event", cascade="all, delete-orphan", lazy="selectin")
    media = relationship("Media", back_populates="event", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Event(id={self.id}, name='{self.name}', status={self.status})>"


class EventAttendee(Base):
    """Link between a user and an event, optionally carrying the user's rating"""

    __tablename__ = "event_attendees"
    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_attendee_rating"),
        CheckConstraint(one_of("status", ATTENDEE_STATUSES), name="ck_attendee_status"),
    )

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True)

    # Attendee status: interested, attending, left, banned
    status = Column(String(16), nullable=False, default="interested")

    # NULL until the user rated the event
    rating = Column(SmallInteger, nullable=True)

    event = relationship("Event", back_populates="attendees")

    def __repr__(self):
        return f"<EventAttendee(user_id={self.user_id}, event_id={self.event_id}, status={self.status})>"
