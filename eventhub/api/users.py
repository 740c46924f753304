# User settings endpoints - read and update recommendation weights

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field

from eventhub.core.database import get_db
from eventhub.models import User
from eventhub.services.discover_service import weights_for_user

router = APIRouter()


class RecommendationSettings(BaseModel):
    tag_intersection_weight: float = Field(ge=0)
    followee_intersection_weight: float = Field(ge=0)
    average_event_rating_weight: float = Field(ge=0)
    distance_weight: float = Field(ge=0)
    media_count_weight: float = Field(ge=0)


def _get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user


def _settings_response(user: User) -> RecommendationSettings:
    weights = weights_for_user(user)
    return RecommendationSettings(
        tag_intersection_weight=weights.tag_intersection,
        followee_intersection_weight=weights.followee_intersection,
        average_event_rating_weight=weights.average_event_rating,
        distance_weight=weights.distance,
        media_count_weight=weights.media_count,
    )


@router.get("/users/{user_id}/recommendation-settings", response_model=RecommendationSettings)
def get_recommendation_settings(user_id: str, db: Session = Depends(get_db)):
    """Effective weights, defaults included"""
    return _settings_response(_get_user(db, user_id))


@router.post("/users/{user_id}/recommendation-settings", response_model=RecommendationSettings)
def set_recommendation_settings(
    user_id: str,
    body: RecommendationSettings,
    db: Session = Depends(get_db),
):
    user = _get_user(db, user_id)

    user.tag_intersection_weight = body.tag_intersection_weight
    user.followee_intersection_weight = body.followee_intersection_weight
    user.average_event_rating_weight = body.average_event_rating_weight
    user.distance_weight = body.distance_weight
    user.media_count_weight = body.media_count_weight
    db.commit()
    db.refresh(user)

    return _settings_response(user)
