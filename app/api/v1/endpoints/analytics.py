from fastapi import APIRouter, Depends, Query, Request
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from typing import List
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.models import User
from app.schemas.schemas import AnalyticsStats, BusinessAnalytics, TrackEventRequest, TrackEventResponse
from app.services import business_service
from app.services.analytics_service import AnalyticsRecorder

router = APIRouter()


@router.post("/track", response_model=TrackEventResponse)
async def track_event(
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Beacon endpoint used by the published pages.
    Always answers 200. The body is parsed by hand; anything that is not a
    JSON object counts as an empty beacon.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None
    event = TrackEventRequest.model_validate(body if isinstance(body, dict) else {})
    await run_in_threadpool(business_service.track_event, db, event.business_id, event.event_type)
    return {"success": True}


@router.get("/business/{business_id}", response_model=AnalyticsStats)
def get_business_analytics(
    business_id: int,
    period: str = Query("all", description="week, month or all"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    business = business_service.get_owned_business(db, business_id, current_user)
    return AnalyticsRecorder(db).get_time_based_stats(business.id, period)


@router.get("/my-businesses", response_model=List[BusinessAnalytics])
def get_my_businesses_analytics(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Lifetime counters for every business the current user owns"""
    recorder = AnalyticsRecorder(db)
    results = []
    for business in business_service.list_user_businesses(db, current_user.id):
        stats = recorder.get_stats(business.id)
        stats["total_events"] = sum(stats.values())
        results.append({
            "business_id": business.id,
            "business_name": business.business_name,
            "slug": business.slug,
            "stats": stats,
        })
    return results
