from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.security import require_main_admin
from app.models.models import Business, User
from app.schemas.schemas import BusinessResponse, PremiumUpdate
from app.services.approval import ApprovalStateMachine
from app.services.business_store import BusinessStore

router = APIRouter()


def _get_business(business_id: int, db: Session) -> Business:
    business = BusinessStore(db).find_by_id(business_id)
    if not business:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Business not found"
        )
    return business


@router.post("/businesses/{business_id}/approve", response_model=BusinessResponse)
def approve_business(
    business_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_main_admin)
):
    """Publish a pending business (main admin only)"""
    business = _get_business(business_id, db)
    return ApprovalStateMachine(db).approve(business)


@router.post("/businesses/{business_id}/reject", response_model=BusinessResponse)
def reject_business(
    business_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_main_admin)
):
    """Reject a pending business (main admin only)"""
    business = _get_business(business_id, db)
    return ApprovalStateMachine(db).reject(business)


@router.post("/businesses/{business_id}/activate", response_model=BusinessResponse)
def activate_business(
    business_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_main_admin)
):
    """Move an approved business to active (main admin only)"""
    business = _get_business(business_id, db)
    return ApprovalStateMachine(db).activate(business)


@router.post("/businesses/{business_id}/approve-edit", response_model=BusinessResponse)
def approve_business_edit(
    business_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_main_admin)
):
    """Apply the edit a content admin submitted for review"""
    business = _get_business(business_id, db)
    return ApprovalStateMachine(db).approve_edit(business)


@router.post("/businesses/{business_id}/reject-edit", response_model=BusinessResponse)
def reject_business_edit(
    business_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_main_admin)
):
    """Discard the edit a content admin submitted for review"""
    business = _get_business(business_id, db)
    return ApprovalStateMachine(db).reject_edit(business)


@router.put("/businesses/{business_id}/premium", response_model=BusinessResponse)
def set_business_premium(
    business_id: int,
    premium: PremiumUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_main_admin)
):
    """Toggle premium placement in the directory"""
    business = _get_business(business_id, db)
    return ApprovalStateMachine(db).set_premium(business, premium.is_premium)
