# User model - profile, location, social graph and recommendation settings

import uuid

from sqlalchemy import Column, String, Float, Table, ForeignKey
from sqlalchemy.orm import relationship
from eventhub.core.database import Base
from .tag import favourite_tags

# Directed follow edges: follower -> leader (the followed user)
follows = Table(
    "follows",
    Base.metadata,
    Column("leader_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("follower_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """User account as far as discovery and media uploads need it"""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(64), nullable=False)
    last_name = Column(String(64), nullable=True)

    # Last known location, used for the distance signal
    lat = Column(Float, nullable=True)
    lon = Column(Float, nullable=True)

    # Recommendation weights - NULL means "use the default"
    tag_intersection_weight = Column(Float, nullable=True)
    followee_intersection_weight = Column(Float, nullable=True)
    average_event_rating_weight = Column(Float, nullable=True)
    distance_weight = Column(Float, nullable=True)
    media_count_weight = Column(Float, nullable=True)

    favourite_tags = relationship("Tag", secondary=favourite_tags, lazy="selectin")
    followees = relationship(
        "User",
        secondary=follows,
        primaryjoin=lambda: User.id == follows.c.follower_id,
        secondaryjoin=lambda: User.id == follows.c.leader_id,
        backref="followers",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<User(id={self.id}, first_name='{self.first_name}')>"
