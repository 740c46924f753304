# Recommendation engine - ranks candidate events for a user by weighted heuristics

from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Optional, Sequence, Tuple

from eventhub.core.exceptions import InvalidArgument
from eventhub.utils.geo import haversine


@dataclass(frozen=True)
class RecommendationWeights:
    """Per-user multipliers of the five ranking signals"""

    tag_intersection: float = 1.0
    followee_intersection: float = 1.0
    average_event_rating: float = 1.0
    distance: float = 1.0
    media_count: float = 1.0

    def __post_init__(self):
        for name, value in self.items():
            if value < 0:
                raise InvalidArgument(f"Weight {name} must be non-negative, got {value}")

    def items(self) -> Tuple[Tuple[str, float], ...]:
        return (
            ("tag_intersection", self.tag_intersection),
            ("followee_intersection", self.followee_intersection),
            ("average_event_rating", self.average_event_rating),
            ("distance", self.distance),
            ("media_count", self.media_count),
        )

    def as_tuple(self) -> Tuple[float, ...]:
        return tuple(value for _, value in self.items())


# Neutral configuration for users that never changed their settings
DEFAULT_WEIGHTS = RecommendationWeights()

# Decimal places compared when ordering scores
SCORE_PRECISION = 9


@dataclass(frozen=True)
class UserProfile:
    id: str
    favourite_tag_ids: FrozenSet[str] = frozenset()
    followee_ids: FrozenSet[str] = frozenset()
    weights: RecommendationWeights = DEFAULT_WEIGHTS
    lat: Optional[float] = None
    lon: Optional[float] = None


@dataclass(frozen=True)
class CandidateEvent:
    """
    Everything the engine needs to know about one event.

    host_rating is the host's average rating over past events, None if nobody
    ever rated them. ``source`` carries the caller's own event object along.
    """

    id: str
    host_id: str
    tag_ids: FrozenSet[str] = frozenset()
    attendee_ids: FrozenSet[str] = frozenset()
    host_rating: Optional[float] = None
    media_count: int = 0
    lat: Optional[float] = None
    lon: Optional[float] = None
    source: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ScoredEvent:
    event: CandidateEvent
    score: float


def distance_term(user: UserProfile, event: CandidateEvent) -> float:
    """1 / (1 + distance in km); 0 when either location is unknown"""
    if None in (user.lat, user.lon, event.lat, event.lon):
        return 0.0
    distance_km = haversine(user.lat, user.lon, event.lat, event.lon) / 1000.0
    return 1.0 / (1.0 + distance_km)


def score_terms(user: UserProfile, event: CandidateEvent) -> Tuple[float, ...]:
    """The five unweighted signals, in RecommendationWeights field order"""
    return (
        float(len(user.favourite_tag_ids & event.tag_ids)),
        float(len(user.followee_ids & event.attendee_ids)),
        float(event.host_rating or 0.0),
        distance_term(user, event),
        float(event.media_count),
    )


def score_event(user: UserProfile, event: CandidateEvent) -> float:
    return sum(w * t for w, t in zip(user.weights.as_tuple(), score_terms(user, event)))


def recommend(user: Optional[UserProfile], events: Sequence[CandidateEvent]) -> List[ScoredEvent]:
    """
    Rank candidate events for a user.

    Args:
        user: The user to rank for
        events: Non-empty list of candidates

    Returns:
        The candidates with their scores, highest score first. Equal scores
        keep their input order.

    Raises:
        InvalidArgument: if user is missing or there are no candidates
    """
    if user is None:
        raise InvalidArgument("Recommendation requested without a user")
    if not events:
        raise InvalidArgument("Recommendation requested without candidate events")

    scored = [ScoredEvent(event=event, score=score_event(user, event)) for event in events]
    # Scores equal up to float noise tie; sorted() is stable, ties keep input order
    return sorted(scored, key=lambda s: -round(s.score, SCORE_PRECISION))
