# Tag model - free-form labels attached to events and picked as user favourites

import uuid

from sqlalchemy import Column, String, Table, ForeignKey
from eventhub.core.database import Base

# Association tables
event_tags = Table(
    "event_tags",
    Base.metadata,
    Column("event_id", String(36), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

favourite_tags = Table(
    "favourite_tags",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base):
    __tablename__ = "tags"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(32), nullable=False, unique=True, index=True)

    def __repr__(self):
        return f"<Tag(id={self.id}, name='{self.name}')>"
