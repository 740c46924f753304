# Discover endpoint - ranked event recommendations for a user

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from pydantic import BaseModel

from eventhub.core.database import get_db
from eventhub.core.exceptions import InvalidArgument
from eventhub.services.discover_service import load_recommendation_input
from eventhub.services.recommendation_service import recommend

router = APIRouter()


class RankedEventResponse(BaseModel):
    id: str
    name: str
    status: str
    host_id: str
    lat: float
    lon: float
    tags: List[str]
    media_count: int
    host_rating: Optional[float]
    score: float


@router.get("/discover", response_model=List[RankedEventResponse])
def discover(
    user_id: str = Query(..., description="User to rank events for"),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    """
    Rank all scheduled and active events for a user, best match first
    """
    profile, candidates = load_recommendation_input(db, user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    try:
        ranked = recommend(profile, candidates)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))

    return [
        RankedEventResponse(
            id=item.event.id,
            name=item.event.source.name,
            status=item.event.source.status,
            host_id=item.event.host_id,
            lat=item.event.lat,
            lon=item.event.lon,
            tags=sorted(tag.name for tag in item.event.source.tags),
            media_count=item.event.media_count,
            host_rating=item.event.host_rating,
            score=item.score,
        )
        for item in ranked[:limit]
    ]
