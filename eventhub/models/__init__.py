# SQLAlchemy database models - User, Tag, Event, EventAttendee, Media

from .tag import Tag, event_tags, favourite_tags
from .user import User, follows
from .event import Event, EventAttendee, EVENT_STATUSES, ATTENDEE_STATUSES
from .media import Media, MEDIA_TYPES
