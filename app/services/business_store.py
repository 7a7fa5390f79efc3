import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.categories import normalize_category
from app.core.config import settings
from app.core.exceptions import (
    ConflictError, InternalInvariantError, NotFoundError, SlugConflict, ValidationError,
)
from app.core.themes import resolve_theme_name
from app.models.models import BUSINESS_STATUSES, Business, SlugRegistry
from app.services.slug_allocator import SlugAllocator

logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 5

REQUIRED_FIELDS = ("business_name", "category", "address", "description")

SOCIAL_LINK_KEYS = ("instagram", "facebook", "website")

# Plain text columns; "" clears them on update
TEXT_FIELDS = (
    "owner_name", "mobile", "map_link", "whatsapp", "logo_url", "youtube_video",
    "navbar_tagline", "footer_description",
)

# JSON columns stored as given
JSON_FIELDS = (
    "images_url", "services", "special_offers", "business_hours", "appointment_settings",
    "faqs", "reviews", "amenities",
)

# Everything an owner edit may touch
EDITABLE_FIELDS = REQUIRED_FIELDS + TEXT_FIELDS + JSON_FIELDS + ("email", "theme", "social_links")

# Set by the lifecycle, applied verbatim
LIFECYCLE_FIELDS = ("status", "edit_approval_status", "pending_changes", "is_premium")


def build_site_urls(slug: str) -> Dict[str, str]:
    """Subdomain and subdirectory URLs for a slug in the current environment"""
    if settings.is_development:
        return {
            "subdomain_url": f"http://{slug}.localhost:{settings.PORT}",
            "subdirectory_url": f"http://localhost:{settings.PORT}/{slug}",
        }
    return {
        "subdomain_url": f"https://{slug}.{settings.BASE_DOMAIN}",
        "subdirectory_url": f"https://{settings.BASE_DOMAIN}/{slug}",
    }


def coerce_social_links(value: Any, previous: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
    """Always exactly ``{instagram, facebook, website}``; keys missing from ``value`` keep ``previous``"""
    previous = previous if isinstance(previous, dict) else {}
    value = value if isinstance(value, dict) else {}
    links = {}
    for key in SOCIAL_LINK_KEYS:
        if value.get(key) is not None:
            links[key] = str(value[key]).strip()
        else:
            links[key] = previous.get(key) or ""
    return links


def _normalize_email(value: Any) -> Optional[str]:
    text = str(value).strip().lower() if value is not None else ""
    return text or None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class BusinessStore:
    """Persistence for business records. Every write normalizes the category."""

    def __init__(self, db: Session):
        self.db = db
        self.slugs = SlugAllocator(db)

    # ==================== READS ====================

    def find_by_id(self, business_id: int) -> Optional[Business]:
        return self.db.query(Business).filter(Business.id == business_id).first()

    def find_by_slug(self, slug: str, statuses: Optional[Iterable[str]] = None) -> Optional[Business]:
        """Look up by slug, optionally restricted to the given statuses"""
        query = self.db.query(Business).filter(Business.slug == slug)
        if statuses is not None:
            query = query.filter(Business.status.in_(list(statuses)))
        return query.first()

    def find_by_user(self, user_id: int) -> List[Business]:
        return (
            self.db.query(Business)
            .filter(Business.user_id == user_id)
            .order_by(Business.created_at.desc(), Business.id.desc())
            .all()
        )

    def find_by_email(self, email: str) -> Optional[Business]:
        normalized = _normalize_email(email)
        if normalized is None:
            return None
        return self.db.query(Business).filter(Business.email == normalized).first()

    def find_all(self, status: Optional[Union[str, Iterable[str]]] = None) -> List[Business]:
        """Premium listings first, then newest"""
        query = self.db.query(Business)
        if isinstance(status, str):
            query = query.filter(Business.status == status)
        elif status is not None:
            query = query.filter(Business.status.in_(list(status)))
        return query.order_by(
            Business.is_premium.desc(), Business.created_at.desc(), Business.id.desc()
        ).all()

    def slug_exists(self, slug: str) -> bool:
        return self.slugs.slug_exists(slug)

    def count_by_status(self) -> Dict[str, int]:
        counts = {status: 0 for status in BUSINESS_STATUSES}
        rows = self.db.query(Business.status, func.count(Business.id)).group_by(Business.status).all()
        for status, count in rows:
            counts[status] = count
        return counts

    # ==================== WRITES ====================

    def create(self, data: Dict[str, Any]) -> Business:
        """
        Insert a new business in ``pending`` status.

        ``data`` may carry a preferred ``slug``. When the insert loses a slug
        race the slug is excluded and a new one allocated, up to
        ``MAX_SLUG_ATTEMPTS`` times.
        """
        for field in REQUIRED_FIELDS:
            if _is_blank(data.get(field)):
                raise ValidationError(f"{field} is required", field=field)

        values = self._clean(data)
        values["social_links"] = coerce_social_links(data.get("social_links"))
        values.setdefault("theme", resolve_theme_name(None))
        values["status"] = "pending"
        values["edit_approval_status"] = "none"
        values["is_premium"] = False
        values["user_id"] = data.get("user_id")

        lost: List[str] = []
        for attempt in range(1, MAX_SLUG_ATTEMPTS + 1):
            slug = self.slugs.allocate(values["business_name"], preferred=data.get("slug"), exclude=lost)
            business = Business(slug=slug, **values, **build_site_urls(slug))
            try:
                self.db.add(business)
                self.db.flush()
                self.db.add(SlugRegistry(slug=slug, business_id=business.id))
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                error = self._translate(exc, slug=slug, context=values)
                if not isinstance(error, SlugConflict):
                    raise error
                lost.append(slug)
                logger.debug(f"Slug {slug!r} lost to a concurrent insert (attempt {attempt})")
                continue

            self.db.refresh(business)
            logger.info(f"Business created: id={business.id} slug={business.slug} category={business.category}")
            return business

        raise ConflictError(
            "Could not allocate a unique slug. Please try again.",
            extra={"field": "slug"},
        )

    def update(
        self,
        business_id: int,
        changes: Optional[Dict[str, Any]] = None,
        lifecycle: Optional[Dict[str, Any]] = None,
    ) -> Business:
        """
        Partial update. In ``changes`` keys that are absent or ``None`` keep the
        stored value. ``lifecycle`` values (status, edit approval state,
        pending changes, premium flag) are written as given, ``None`` included.
        """
        business = self.find_by_id(business_id)
        if business is None:
            raise NotFoundError("Business not found")

        changes = changes or {}
        self.validate_changes(changes)

        values = self._clean(changes)
        if changes.get("social_links") is not None:
            values["social_links"] = coerce_social_links(changes["social_links"], business.social_links)

        for field, value in values.items():
            setattr(business, field, value)
        for field, value in (lifecycle or {}).items():
            if field in LIFECYCLE_FIELDS:
                setattr(business, field, value)

        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise self._translate(exc, slug=business.slug, context={"business_id": business_id, **values})

        self.db.refresh(business)
        return business

    # ==================== HELPERS ====================

    @staticmethod
    def validate_changes(changes: Dict[str, Any]) -> None:
        """A required field may be left out of an edit but not blanked"""
        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is not None and _is_blank(changes[field]):
                raise ValidationError(f"{field} cannot be empty", field=field)

    @staticmethod
    def editable_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
        """Drop unknown keys and ``None`` values"""
        return {
            field: value for field, value in changes.items()
            if field in EDITABLE_FIELDS and value is not None
        }

    def _clean(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize the editable fields present in ``data``; ``None`` means not provided"""
        values: Dict[str, Any] = {}
        for field in EDITABLE_FIELDS:
            if field not in data or data[field] is None or field == "social_links":
                continue
            value = data[field]
            if field == "category":
                value = normalize_category(value)
            elif field == "theme":
                value = resolve_theme_name(value)
            elif field == "email":
                value = _normalize_email(value)
            elif field in REQUIRED_FIELDS:
                value = str(value).strip()
            elif field in TEXT_FIELDS:
                value = str(value).strip() or None
            values[field] = value
        return values

    def _translate(self, exc: IntegrityError, slug: str, context: Dict[str, Any]) -> Exception:
        """Map a constraint violation onto a domain error"""
        # First line only; PostgreSQL appends the offending row values after it
        lines = str(exc.orig).strip().splitlines()
        message = lines[0].lower() if lines else ""

        if "check constraint" in message:
            logger.error(f"Check constraint violated while saving business: {exc.orig} context={context}")
            return InternalInvariantError(InternalInvariantError.public_detail)

        if "unique constraint" in message:
            if "slug" in message:
                return SlugConflict(slug)
            if "email" in message:
                return ConflictError("Email already exists", extra={"field": "email"})

        logger.error(f"Integrity error while saving business: {exc.orig} context={context}")
        return InternalInvariantError(InternalInvariantError.public_detail)
