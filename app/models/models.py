from sqlalchemy import (
    JSON, Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from datetime import datetime

from app.core.categories import CATEGORIES
from app.core.database import Base
from app.core.themes import THEMES

BUSINESS_STATUSES = ("pending", "approved", "rejected", "active")
EDIT_APPROVAL_STATUSES = ("none", "pending", "approved", "rejected")
USER_ROLES = ("normal", "content_admin", "main_admin")

# Counter columns on the analytics table
ANALYTICS_COUNTERS = ("visitor_count", "call_clicks", "whatsapp_clicks", "gallery_views", "map_clicks")

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _in_list(column, values):
    quoted = ", ".join("'" + value.replace("'", "''") + "'" for value in values)
    return f"{column} IN ({quoted})"


class User(Base):
    """Account that may own businesses. Only ``id`` and ``role`` matter to the lifecycle."""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(_in_list("role", USER_ROLES), name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    role = Column(String, nullable=False, default="normal")  # normal, content_admin, main_admin
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    businesses = relationship("Business", back_populates="owner")


class Business(Base):
    __tablename__ = "businesses"
    __table_args__ = (
        UniqueConstraint("slug", name="uq_businesses_slug"),
        UniqueConstraint("email", name="uq_businesses_email"),
        CheckConstraint(_in_list("category", CATEGORIES), name="ck_businesses_category"),
        CheckConstraint(_in_list("status", BUSINESS_STATUSES), name="ck_businesses_status"),
        CheckConstraint(
            _in_list("edit_approval_status", EDIT_APPROVAL_STATUSES),
            name="ck_businesses_edit_approval_status",
        ),
        CheckConstraint(_in_list("theme", tuple(THEMES)), name="ck_businesses_theme"),
    )

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(50), nullable=False, index=True)  # Public identifier, never changes
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    business_name = Column(String, nullable=False)
    owner_name = Column(String, nullable=True)
    category = Column(String, nullable=False, default="Services")
    address = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    mobile = Column(String, nullable=True)
    email = Column(String, nullable=True, index=True)  # Stored lower-cased
    map_link = Column(Text, nullable=True)
    whatsapp = Column(String, nullable=True)

    # Presentation
    logo_url = Column(Text, nullable=True)
    images_url = Column(JSONType, nullable=True)  # List of image URLs
    youtube_video = Column(Text, nullable=True)
    theme = Column(String, nullable=False, default="modern")
    navbar_tagline = Column(String, nullable=True)
    footer_description = Column(Text, nullable=True)
    social_links = Column(JSONType, nullable=True)  # {instagram, facebook, website}

    # Structured content
    services = Column(JSONType, nullable=True)  # [{title, description, price, image, featured}]
    special_offers = Column(JSONType, nullable=True)  # [{title, description, expiryDate}]
    business_hours = Column(JSONType, nullable=True)  # {monday: {open, start, end}, ...}
    appointment_settings = Column(JSONType, nullable=True)  # {enabled, contactMethod, serviceTypes, ...}
    faqs = Column(JSONType, nullable=True)  # [{question, answer}]
    reviews = Column(JSONType, nullable=True)  # [{name, rating, comment, date}]
    amenities = Column(JSONType, nullable=True)  # [str]

    # Lifecycle
    status = Column(String, nullable=False, default="pending", index=True)
    edit_approval_status = Column(String, nullable=False, default="none")
    pending_changes = Column(JSONType, nullable=True)  # Edit parked until an admin decides
    is_premium = Column(Boolean, nullable=False, default=False)

    subdomain_url = Column(String, nullable=True)
    subdirectory_url = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="businesses")


class SlugRegistry(Base):
    """Every slug ever handed out. Rows outlive the business they were issued to."""
    __tablename__ = "slug_registry"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(50), unique=True, nullable=False, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class AnalyticsCounter(Base):
    __tablename__ = "analytics"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id", ondelete="CASCADE"), unique=True, nullable=False)
    visitor_count = Column(Integer, nullable=False, default=0)
    call_clicks = Column(Integer, nullable=False, default=0)
    whatsapp_clicks = Column(Integer, nullable=False, default=0)
    gallery_views = Column(Integer, nullable=False, default=0)
    map_clicks = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class AnalyticsEvent(Base):
    """Append-only interaction log"""
    __tablename__ = "analytics_events"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True)
    event_type = Column(String(50), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
