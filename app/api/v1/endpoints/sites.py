"""
Public business pages.

A business is reachable as ``/<slug>`` on the main domain or as
``<slug>.<BASE_DOMAIN>``. Only approved businesses are served.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.services import business_service

router = APIRouter()

# Subdomains that belong to the platform rather than to a business
RESERVED_SUBDOMAINS = {"www", "api", "admin"}


def subdomain_slug(host: Optional[str]) -> Optional[str]:
    """Slug carried in a ``<slug>.<BASE_DOMAIN>`` host header, if any"""
    if not host:
        return None
    host = host.split(":")[0].lower()
    suffix = f".{settings.BASE_DOMAIN.lower()}"
    if not host.endswith(suffix):
        return None
    label = host[: -len(suffix)]
    if not label or "." in label or label in RESERVED_SUBDOMAINS:
        return None
    return label


@router.get("/", include_in_schema=False)
def read_root(request: Request, db: Session = Depends(get_db)):
    slug = subdomain_slug(request.headers.get("host"))
    if slug is None:
        return {"message": f"Welcome to {settings.PROJECT_NAME}"}
    return HTMLResponse(business_service.get_business_page(db, slug, settings.api_base_url))


@router.get("/{slug}", response_class=HTMLResponse, include_in_schema=False)
def read_business_page(slug: str, db: Session = Depends(get_db)):
    return HTMLResponse(business_service.get_business_page(db, slug, settings.api_base_url))
