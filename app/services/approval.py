"""
Approval lifecycle for business listings.

Listing status::

    pending --> approved --> active
        \\
         --> rejected

Edit approval applies only once a listing is published (approved or active)
and only to content admins. Their edits are parked in ``pending_changes``
until a main admin approves or rejects them; the public page keeps showing
the last approved content meanwhile.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.exceptions import AuthorizationError, ConflictError
from app.models.models import Business, User
from app.services.business_store import BusinessStore

logger = logging.getLogger(__name__)

STATUS_TRANSITIONS = {
    "pending": ("approved", "rejected"),
    "approved": ("active",),
}

PUBLISHED_STATUSES = ("approved", "active")

# Statuses that count against the one-business limit for content admins
CARDINALITY_STATUSES = ("approved", "pending")

DEFAULT_ROLE = "normal"


class ApprovalStateMachine:
    def __init__(self, db: Session):
        self.db = db
        self.store = BusinessStore(db)

    def resolve_role(self, user_id: Optional[int]) -> str:
        """Current role from the users table; never taken from the token"""
        if user_id is None:
            return DEFAULT_ROLE
        role = self.db.query(User.role).filter(User.id == user_id).scalar()
        return role or DEFAULT_ROLE

    def ensure_can_create(self, user_id: Optional[int]) -> None:
        """Content admins may hold a single pending or approved business"""
        if self.resolve_role(user_id) != "content_admin":
            return

        existing = (
            self.db.query(Business)
            .filter(Business.user_id == user_id, Business.status.in_(CARDINALITY_STATUSES))
            .order_by(Business.created_at.asc(), Business.id.asc())
            .first()
        )
        if existing is not None:
            raise ConflictError(
                "Content admins can only create one business. "
                "You already have a business that is pending or approved.",
                extra={
                    "existing_business": {
                        "id": existing.id,
                        "business_name": existing.business_name,
                        "status": existing.status,
                    }
                },
            )

    def ensure_can_edit(self, user_id: Optional[int], business: Business) -> str:
        """Only the owner or a main admin may edit. Returns the resolved role."""
        role = self.resolve_role(user_id)
        if role == "main_admin":
            return role
        if user_id is None or business.user_id != user_id:
            raise AuthorizationError("You do not have permission to update this business")
        return role

    @staticmethod
    def requires_edit_review(role: str, business: Business) -> bool:
        return role == "content_admin" and business.status in PUBLISHED_STATUSES

    def submit_edit(self, business: Business, changes: Dict[str, Any], role: str) -> Tuple[Business, bool]:
        """
        Apply an edit or park it for review.

        Returns the business and whether the edit now awaits approval.
        """
        self.store.validate_changes(changes)

        if self.requires_edit_review(role, business):
            parked = dict(business.pending_changes or {}) if business.edit_approval_status == "pending" else {}
            parked.update(self.store.editable_changes(changes))
            business = self.store.update(
                business.id,
                lifecycle={"pending_changes": parked, "edit_approval_status": "pending"},
            )
            logger.info(f"Edit parked for review: business_id={business.id} fields={sorted(parked)}")
            return business, True

        business = self.store.update(
            business.id,
            changes,
            lifecycle={"pending_changes": None, "edit_approval_status": "none"},
        )
        return business, False

    # ==================== ADMIN ACTIONS ====================

    def approve(self, business: Business) -> Business:
        return self._transition(business, "approved")

    def reject(self, business: Business) -> Business:
        return self._transition(business, "rejected")

    def activate(self, business: Business) -> Business:
        return self._transition(business, "active")

    def approve_edit(self, business: Business) -> Business:
        """Apply the parked edit through the store so it is normalized like any other write"""
        self._ensure_pending_edit(business)
        business = self.store.update(
            business.id,
            business.pending_changes or {},
            lifecycle={"pending_changes": None, "edit_approval_status": "approved"},
        )
        logger.info(f"Edit approved: business_id={business.id}")
        return business

    def reject_edit(self, business: Business) -> Business:
        self._ensure_pending_edit(business)
        business = self.store.update(
            business.id,
            lifecycle={"pending_changes": None, "edit_approval_status": "rejected"},
        )
        logger.info(f"Edit rejected: business_id={business.id}")
        return business

    def set_premium(self, business: Business, is_premium: bool) -> Business:
        return self.store.update(business.id, lifecycle={"is_premium": bool(is_premium)})

    def _transition(self, business: Business, target: str) -> Business:
        current = business.status
        if target not in STATUS_TRANSITIONS.get(current, ()):
            raise ConflictError(
                f"Cannot change status from {current} to {target}",
                extra={"status": current},
            )
        business = self.store.update(business.id, lifecycle={"status": target})
        logger.info(f"Business status changed: id={business.id} {current} -> {target}")
        return business

    @staticmethod
    def _ensure_pending_edit(business: Business) -> None:
        if business.edit_approval_status != "pending":
            raise ConflictError(
                "Business has no edit awaiting approval",
                extra={"edit_approval_status": business.edit_approval_status},
            )
