# Discover service - loads users and candidate events from the database for ranking

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from eventhub.models import Event, EventAttendee, Media, User
from eventhub.services.recommendation_service import (
    DEFAULT_WEIGHTS,
    CandidateEvent,
    RecommendationWeights,
    UserProfile,
)

logger = logging.getLogger(__name__)

# Only upcoming and running events are worth recommending
CANDIDATE_STATUSES = ("scheduled", "active")


def _or_default(value: Optional[float], default: float) -> float:
    return default if value is None else float(value)


def weights_for_user(user: User) -> RecommendationWeights:
    """User's stored weights, falling back to the defaults for unset ones"""
    return RecommendationWeights(
        tag_intersection=_or_default(user.tag_intersection_weight, DEFAULT_WEIGHTS.tag_intersection),
        followee_intersection=_or_default(user.followee_intersection_weight, DEFAULT_WEIGHTS.followee_intersection),
        average_event_rating=_or_default(user.average_event_rating_weight, DEFAULT_WEIGHTS.average_event_rating),
        distance=_or_default(user.distance_weight, DEFAULT_WEIGHTS.distance),
        media_count=_or_default(user.media_count_weight, DEFAULT_WEIGHTS.media_count),
    )


def profile_for_user(user: User) -> UserProfile:
    return UserProfile(
        id=user.id,
        favourite_tag_ids=frozenset(tag.id for tag in user.favourite_tags),
        followee_ids=frozenset(followee.id for followee in user.followees),
        weights=weights_for_user(user),
        lat=user.lat,
        lon=user.lon,
    )


def host_ratings(db: Session, host_ids: Iterable[str]) -> Dict[str, float]:
    """
    Average rating over all completed events of each host

    Hosts without any rating are missing from the result.
    """
    host_ids = list(set(host_ids))
    if not host_ids:
        return {}

    rows = (
        db.query(Event.host_id, func.avg(EventAttendee.rating))
        .join(EventAttendee, EventAttendee.event_id == Event.id)
        .filter(
            Event.host_id.in_(host_ids),
            Event.status == "completed",
            EventAttendee.rating.isnot(None),
        )
        .group_by(Event.host_id)
        .all()
    )
    return {host_id: float(avg) for host_id, avg in rows if avg is not None}


def available_media_counts(db: Session, event_ids: Iterable[str]) -> Dict[str, int]:
    """Number of processed (file_available) media items per event"""
    event_ids = list(event_ids)
    if not event_ids:
        return {}

    rows = (
        db.query(Media.event_id, func.count(Media.id))
        .filter(Media.event_id.in_(event_ids), Media.file_available.is_(True))
        .group_by(Media.event_id)
        .all()
    )
    return {event_id: int(count) for event_id, count in rows}


def to_candidates(db: Session, events: Sequence[Event]) -> List[CandidateEvent]:
    ratings = host_ratings(db, (event.host_id for event in events))
    media_counts = available_media_counts(db, (event.id for event in events))

    return [
        CandidateEvent(
            id=event.id,
            host_id=event.host_id,
            tag_ids=frozenset(tag.id for tag in event.tags),
            attendee_ids=frozenset(a.user_id for a in event.attendees if a.status != "banned"),
            host_rating=ratings.get(event.host_id),
            media_count=media_counts.get(event.id, 0),
            lat=event.lat,
            lon=event.lon,
            source=event,
        )
        for event in events
    ]


def load_recommendation_input(db: Session, user_id: str) -> Tuple[Optional[UserProfile], List[CandidateEvent]]:
    """
    Build the engine input for a user

    Returns:
        (profile, candidates); profile is None if the user does not exist
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return None, []

    events = (
        db.query(Event)
        .filter(Event.status.in_(CANDIDATE_STATUSES))
        .order_by(Event.start_date_time.asc(), Event.id.asc())
        .all()
    )
    logger.debug(f"Loaded {len(events)} candidate events for user {user_id}")

    return profile_for_user(user), to_candidates(db, events)
