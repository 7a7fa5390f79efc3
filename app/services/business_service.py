"""
Business operations used by the API layer.

Each function takes the request-scoped session and composes the store,
slug allocator, approval state machine, renderer and analytics recorder.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.models.models import Business, User
from app.services.analytics_service import AnalyticsRecorder
from app.services.approval import ApprovalStateMachine
from app.services.business_store import BusinessStore, build_site_urls
from app.services.site_renderer import render_business_page
from app.services.slug_allocator import SlugAllocator
from app.utils.slug import clean_slug_input, is_valid_slug, strip_slug_input

logger = logging.getLogger(__name__)

__all__ = [
    "build_site_urls",
    "check_slug_availability",
    "create_business",
    "get_business_page",
    "get_owned_business",
    "get_public_stats",
    "list_businesses",
    "list_user_businesses",
    "track_event",
    "update_business",
]

# Reported when there are no businesses yet
DEFAULT_TRUST_PERCENTAGE = 98

PUBLIC_STATUSES = ("approved",)


def create_business(db: Session, payload: Dict[str, Any], requesting_user_id: Optional[int]) -> Business:
    """
    Register a business for the caller, or anonymously when no user is given.

    The new business starts in ``pending`` and is not publicly visible until
    approved.
    """
    ApprovalStateMachine(db).ensure_can_create(requesting_user_id)

    data = dict(payload)
    data["user_id"] = requesting_user_id
    return BusinessStore(db).create(data)


def update_business(
    db: Session, business_id: int, payload: Dict[str, Any], requesting_user_id: Optional[int]
) -> Tuple[Business, bool]:
    """Returns the business and whether the edit awaits admin approval"""
    business = BusinessStore(db).find_by_id(business_id)
    if business is None:
        raise NotFoundError("Business not found")

    machine = ApprovalStateMachine(db)
    role = machine.ensure_can_edit(requesting_user_id, business)
    return machine.submit_edit(business, payload, role)


def get_business_page(db: Session, slug: str, api_base_url: Optional[str] = None) -> str:
    """Rendered HTML for an approved business"""
    slug = clean_slug_input(slug)
    business = BusinessStore(db).find_by_slug(slug, PUBLIC_STATUSES) if is_valid_slug(slug) else None
    if business is None:
        raise NotFoundError("Business not found")
    return render_business_page(business, api_base_url=api_base_url)


def check_slug_availability(db: Session, slug: Any) -> Dict[str, Any]:
    slug = strip_slug_input(slug)
    if not is_valid_slug(slug):
        raise ValidationError(
            "Slug must be 3-50 characters long and contain only lowercase letters and numbers",
            field="slug",
        )

    allocator = SlugAllocator(db)
    if allocator.slug_exists(slug):
        return {
            "available": False,
            "slug": slug,
            "suggestions": allocator.suggest_alternatives(slug) or None,
        }
    return {"available": True, "slug": slug}


def track_event(db: Session, business_id: Any, event_type: Any) -> None:
    """Record a page interaction; never raises"""
    if not isinstance(event_type, str):
        logger.debug(f"Ignoring analytics event with non-text type {event_type!r}")
        return
    try:
        if isinstance(business_id, bool):
            raise TypeError("boolean business id")
        business_id = int(business_id) if business_id not in (None, "") else None
    except (TypeError, ValueError, OverflowError):
        logger.debug(f"Ignoring analytics event with malformed business id {business_id!r}")
        return
    AnalyticsRecorder(db).record_event(business_id, event_type)


def get_owned_business(db: Session, business_id: int, user: User) -> Business:
    """Business visible to its owner and to main admins"""
    business = BusinessStore(db).find_by_id(business_id)
    if business is None:
        raise NotFoundError("Business not found")
    if business.user_id != user.id and user.role != "main_admin":
        raise AuthorizationError("You do not have permission to view this business")
    return business


def list_user_businesses(db: Session, user_id: int) -> List[Business]:
    return BusinessStore(db).find_by_user(user_id)


def list_businesses(db: Session, status: Optional[str] = "approved") -> List[Business]:
    return BusinessStore(db).find_all(status=status)


def get_public_stats(db: Session) -> Dict[str, int]:
    counts = BusinessStore(db).count_by_status()
    total = sum(counts.values())
    approved = counts["approved"]
    trust = int(approved * 100 / total + 0.5) if total else DEFAULT_TRUST_PERCENTAGE
    return {
        "total_businesses": total,
        "approved_businesses": approved,
        "total_users": db.query(User).count(),
        "trust_percentage": trust,
    }
