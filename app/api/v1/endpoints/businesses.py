from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.categories import get_categories
from app.core.database import get_db
from app.core.security import get_current_user, get_current_user_optional
from app.core.themes import get_theme, get_themes
from app.models.models import User
from app.schemas.schemas import (
    BusinessCreate, BusinessResponse, BusinessSummary, BusinessUpdate, BusinessUpdateResponse,
    PublicStats, SlugAvailability,
)
from app.services import business_service

router = APIRouter()


@router.get("/check-slug", response_model=SlugAvailability, response_model_exclude_none=True)
def check_slug(
    slug: str = Query(..., description="Slug to check"),
    db: Session = Depends(get_db)
):
    """Check whether a slug is free and suggest alternatives when it is not"""
    return business_service.check_slug_availability(db, slug)


@router.get("/stats", response_model=PublicStats)
def get_public_stats(db: Session = Depends(get_db)):
    """Public platform counters shown on the landing page"""
    return business_service.get_public_stats(db)


@router.get("/themes")
def list_themes():
    """Available page themes"""
    return [
        {"key": key, "name": get_theme(key)["name"], "description": get_theme(key)["description"]}
        for key in get_themes()
    ]


@router.get("/categories", response_model=List[str])
def list_categories():
    """Business categories accepted by the platform"""
    return get_categories()


@router.get("/my-businesses", response_model=List[BusinessResponse])
def get_my_businesses(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Businesses owned by the current user, newest first"""
    return business_service.list_user_businesses(db, current_user.id)


@router.post("", response_model=BusinessResponse, status_code=status.HTTP_201_CREATED)
def create_business(
    business_data: BusinessCreate,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    """
    Register a new business website.
    The business starts as pending and goes live once an admin approves it.
    """
    payload = business_data.model_dump(mode="json", exclude_unset=True)
    return business_service.create_business(db, payload, current_user.id if current_user else None)


@router.get("", response_model=List[BusinessSummary])
def list_businesses(
    status_filter: str = Query("approved", alias="status"),
    db: Session = Depends(get_db)
):
    """Public directory, premium listings first"""
    return business_service.list_businesses(db, status_filter)


@router.get("/{business_id}", response_model=BusinessResponse)
def get_business(
    business_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a business (owner or main admin)"""
    return business_service.get_owned_business(db, business_id, current_user)


@router.put("/{business_id}", response_model=BusinessUpdateResponse)
def update_business(
    business_id: int,
    business_update: BusinessUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Update a business.
    Content admins editing a published business get their changes queued for approval.
    """
    payload = business_update.model_dump(mode="json", exclude_unset=True)
    business, requires_approval = business_service.update_business(db, business_id, payload, current_user.id)

    if requires_approval:
        message = "Changes submitted for approval. They will go live once an admin approves them."
    else:
        message = "Business updated successfully"
    return {"message": message, "requires_approval": requires_approval, "business": business}
