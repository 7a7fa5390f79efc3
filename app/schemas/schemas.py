from __future__ import annotations
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union


# Business schemas
class BusinessContent(BaseModel):
    """Fields an owner may set on create and edit later"""
    business_name: Optional[str] = None
    owner_name: Optional[str] = None
    category: Optional[Union[str, Dict[str, Any]]] = None  # Free text or {value|name|category|label: ...}
    address: Optional[str] = None
    description: Optional[str] = None
    mobile: Optional[str] = None
    email: Optional[EmailStr] = None
    map_link: Optional[str] = None
    whatsapp: Optional[str] = None

    logo_url: Optional[str] = None
    images_url: Optional[List[str]] = None
    youtube_video: Optional[str] = None
    theme: Optional[str] = None
    navbar_tagline: Optional[str] = None
    footer_description: Optional[str] = None
    social_links: Optional[Dict[str, Optional[str]]] = None

    services: Optional[List[Dict[str, Any]]] = None
    special_offers: Optional[List[Dict[str, Any]]] = None
    business_hours: Optional[Dict[str, Any]] = None
    appointment_settings: Optional[Dict[str, Any]] = None
    faqs: Optional[List[Dict[str, Any]]] = None
    reviews: Optional[List[Dict[str, Any]]] = None
    amenities: Optional[List[str]] = None


class BusinessCreate(BusinessContent):
    """Registration payload. Required fields are checked by the service so blanks count as missing."""
    slug: Optional[str] = None  # Preferred slug, used when free and well formed


class BusinessUpdate(BusinessContent):
    pass


class BusinessResponse(BaseModel):
    id: int
    slug: str
    user_id: Optional[int] = None
    business_name: str
    owner_name: Optional[str] = None
    category: str
    address: str
    description: str
    mobile: Optional[str] = None
    email: Optional[str] = None
    map_link: Optional[str] = None
    whatsapp: Optional[str] = None
    logo_url: Optional[str] = None
    images_url: Optional[List[str]] = None
    youtube_video: Optional[str] = None
    theme: str
    navbar_tagline: Optional[str] = None
    footer_description: Optional[str] = None
    social_links: Optional[Dict[str, Optional[str]]] = None
    services: Optional[List[Dict[str, Any]]] = None
    special_offers: Optional[List[Dict[str, Any]]] = None
    business_hours: Optional[Dict[str, Any]] = None
    appointment_settings: Optional[Dict[str, Any]] = None
    faqs: Optional[List[Dict[str, Any]]] = None
    reviews: Optional[List[Dict[str, Any]]] = None
    amenities: Optional[List[str]] = None
    status: str
    edit_approval_status: str
    pending_changes: Optional[Dict[str, Any]] = None
    is_premium: bool
    subdomain_url: Optional[str] = None
    subdirectory_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BusinessSummary(BaseModel):
    """Directory listing entry"""
    id: int
    slug: str
    business_name: str
    category: str
    address: str
    logo_url: Optional[str] = None
    status: str
    is_premium: bool
    subdomain_url: Optional[str] = None
    subdirectory_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class BusinessUpdateResponse(BaseModel):
    message: str
    requires_approval: bool
    business: BusinessResponse


class SlugAvailability(BaseModel):
    available: bool
    slug: str
    suggestions: Optional[List[str]] = None


class PublicStats(BaseModel):
    total_businesses: int
    approved_businesses: int
    total_users: int
    trust_percentage: int


class PremiumUpdate(BaseModel):
    is_premium: bool


# Analytics schemas
class TrackEventRequest(BaseModel):
    """Beacon body. Values are taken as sent and coerced by the analytics service."""
    business_id: Optional[Any] = Field(None, alias="businessId")
    event_type: Optional[Any] = Field(None, alias="eventType")

    class Config:
        populate_by_name = True


class TrackEventResponse(BaseModel):
    success: bool = True


class AnalyticsTotals(BaseModel):
    visitor_count: int = 0
    call_clicks: int = 0
    whatsapp_clicks: int = 0
    gallery_views: int = 0
    map_clicks: int = 0
    total_events: int = 0


class AnalyticsStats(BaseModel):
    period: str
    totals: AnalyticsTotals
    breakdown: Dict[str, int]


class BusinessAnalytics(BaseModel):
    business_id: int
    business_name: str
    slug: str
    stats: AnalyticsTotals
