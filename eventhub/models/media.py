# Media model - images and clips uploaded to an event

import uuid

from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from eventhub.core.database import Base, one_of

MEDIA_TYPES = ("image", "video")


class Media(Base):
    """An uploaded image or clip; only usable once file_available is set"""

    __tablename__ = "media"
    __table_args__ = (
        CheckConstraint(one_of("type", MEDIA_TYPES), name="ck_media_type"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Media type: image, video
    type = Column(String(8), nullable=False)

    # Set by the upload handler after processing succeeded
    file_available = Column(Boolean, nullable=False, default=False)

    length = Column(Integer, nullable=False, default=0)  # Clip length in seconds

    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    event = relationship("Event", back_populates="media")

    def __repr__(self):
        return f"<Media(id={self.id}, type={self.type}, file_available={self.file_available})>"
