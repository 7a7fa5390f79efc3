"""
Business record -> render context.

Everything the templates need is derived here so the templates only
format values. The context holds plain dicts, lists and scalars.
"""
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote_plus, urlsplit

from app.core.config import settings
from app.core.themes import get_theme, resolve_theme_name
from app.services.site_renderer import seo

# Review carousel advance interval
CAROUSEL_INTERVAL_MS = 5000

_NON_DIGIT = re.compile(r"[^0-9]")

# Link targets rendered into href and src attributes
SAFE_URL_SCHEMES = ("http", "https")

# Navigation entries in page order; only sections that render are linked
NAV_SECTIONS = (
    ("about", "About"),
    ("gallery", "Gallery"),
    ("services", "Services"),
    ("offers", "Offers"),
    ("hours", "Hours"),
    ("booking", "Book"),
    ("reviews", "Reviews"),
    ("faq", "FAQ"),
    ("contact", "Contact"),
)


def default_site() -> Dict[str, Any]:
    """Platform-level values shared by every page"""
    return {
        "name": settings.SITE_NAME,
        "root_url": settings.site_root_url,
        "city": settings.DEFAULT_CITY,
        "state": settings.DEFAULT_STATE,
        "country_code": settings.DEFAULT_COUNTRY_CODE,
        "default_latitude": settings.DEFAULT_LATITUDE,
        "default_longitude": settings.DEFAULT_LONGITUDE,
    }


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _dicts(value: Any) -> List[Dict[str, Any]]:
    return [item for item in _list(value) if isinstance(item, dict)]


def _mapping(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


def _http_url(value: Any) -> str:
    """The URL when it is http or https, otherwise empty"""
    text = _text(value)
    return text if urlsplit(text).scheme.lower() in SAFE_URL_SCHEMES else ""


def _social_links(links: Dict[str, Any]) -> Dict[str, str]:
    """Instagram may be a bare handle; the other links must be http(s) URLs"""
    cleaned = {}
    for key, value in links.items():
        value = _text(value) if key == "instagram" else _http_url(value)
        if value:
            cleaned[key] = value
    return cleaned


def _business_fields(business: Any) -> Dict[str, Any]:
    name = _text(getattr(business, "business_name", None)) or "Business"
    owner_name = _text(getattr(business, "owner_name", None))
    whatsapp = _text(getattr(business, "whatsapp", None))
    social = _mapping(getattr(business, "social_links", None))
    return {
        "id": getattr(business, "id", None),
        "slug": _text(getattr(business, "slug", None)),
        "name": name,
        "initial": name[0].upper(),
        "category": _text(getattr(business, "category", None)) or "Services",
        "owner_name": owner_name,
        "owner_first_name": owner_name.split(" ")[0] if owner_name else "",
        "address": _text(getattr(business, "address", None)),
        "description": _text(getattr(business, "description", None)),
        "mobile": _text(getattr(business, "mobile", None)),
        "email": _text(getattr(business, "email", None)),
        "whatsapp": whatsapp,
        "whatsapp_digits": _NON_DIGIT.sub("", whatsapp),
        "map_link": _http_url(getattr(business, "map_link", None)),
        "logo_url": _http_url(getattr(business, "logo_url", None)),
        "images": [_http_url(image) for image in _list(getattr(business, "images_url", None)) if _http_url(image)],
        "navbar_tagline": _text(getattr(business, "navbar_tagline", None)),
        "footer_description": _text(getattr(business, "footer_description", None)),
        "social_links": _social_links(social),
        "business_hours": _mapping(getattr(business, "business_hours", None)),
        "is_premium": bool(getattr(business, "is_premium", False)),
        "subdomain_url": _text(getattr(business, "subdomain_url", None)),
        "subdirectory_url": _text(getattr(business, "subdirectory_url", None)),
        "created_at": getattr(business, "created_at", None),
        "updated_at": getattr(business, "updated_at", None),
    }


def _image_alt(business: Dict[str, Any], site: Dict[str, Any], index: int) -> str:
    return f"{business['name']} - {business['category']} gallery image {index + 1} in {site['city']}, {site['state']}"


def _services(raw: Any, business: Dict[str, Any], site: Dict[str, Any]) -> List[Dict[str, Any]]:
    services = []
    for service in _dicts(raw):
        title = _text(service.get("title") or service.get("name")) or "Service"
        price = service.get("price")
        services.append({
            "title": title,
            "description": _text(service.get("description")),
            "price": _text(price) if price not in (None, "") else "",
            "image": _text(service.get("image") or service.get("imageUrl")),
            "image_alt": f"{business['name']} - {title} service in {site['city']}",
            "featured": bool(service.get("featured")),
        })
    return services


def _offers(raw: Any) -> List[Dict[str, Any]]:
    return [
        {
            "title": _text(offer.get("title")) or "Special Offer",
            "description": _text(offer.get("description")),
            "expiry_date": _text(offer.get("expiryDate") or offer.get("expiry_date")),
        }
        for offer in _dicts(raw)
    ]


def _hours(raw: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Rows in weekday order; empty when no day is open"""
    rows = []
    for day in seo.WEEKDAYS:
        entry = raw.get(day)
        if not isinstance(entry, dict):
            continue
        rows.append({
            "day": day,
            "label": day.capitalize(),
            "open": bool(entry.get("open")),
            "start": _text(entry.get("start")) or "09:00",
            "end": _text(entry.get("end")) or "18:00",
        })
    if not any(row["open"] for row in rows):
        return []
    return rows


def _booking(raw: Any) -> Optional[Dict[str, Any]]:
    settings_map = _mapping(raw)
    contact_method = _text(settings_map.get("contactMethod"))
    if not settings_map.get("enabled") and not contact_method:
        return None
    return {
        "contact_method": contact_method,
        "service_types": [_text(item) for item in _list(settings_map.get("serviceTypes")) if _text(item)],
    }


def _reviews(raw: Any) -> List[Dict[str, Any]]:
    reviews = []
    for review in _dicts(raw):
        comment = _text(review.get("comment") or review.get("text"))
        if not comment:
            continue
        try:
            stars = max(0, min(5, int(round(float(review.get("rating"))))))
        except (TypeError, ValueError, OverflowError):
            stars = 0
        reviews.append({
            "name": _text(review.get("name")) or "Customer",
            "rating": review.get("rating"),
            "stars": stars,
            "comment": comment,
            "date": _text(review.get("date")),
        })
    return reviews


def _faqs(raw: Any) -> List[Dict[str, str]]:
    return [
        {"question": _text(faq.get("question")), "answer": _text(faq.get("answer"))}
        for faq in _dicts(raw)
        if _text(faq.get("question"))
    ]


def _social(links: Dict[str, str]) -> List[Dict[str, str]]:
    social = []
    if links.get("instagram"):
        social.append({"label": "Instagram", "url": seo.instagram_url(links["instagram"])})
    if links.get("facebook"):
        social.append({"label": "Facebook", "url": links["facebook"]})
    if links.get("website"):
        social.append({"label": "Website", "url": links["website"]})
    return social


def build_view_model(
    business: Any,
    theme: Optional[str] = None,
    api_base_url: Optional[str] = None,
    site: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Derive the full render context for a business page.

    ``theme`` overrides the business's own theme. ``api_base_url`` is where
    the page's scripts send beacons and bookings.
    """
    site = site or default_site()
    api_base_url = (api_base_url or settings.api_base_url).rstrip("/")
    theme_name = resolve_theme_name(theme or getattr(business, "theme", None))

    fields = _business_fields(business)
    canonical_url = (
        fields["subdomain_url"] or fields["subdirectory_url"] or f"{site['root_url']}/{fields['slug']}"
    )
    area = fields["address"].split(",")[0].strip() or site["city"]
    youtube_id = seo.extract_youtube_id(getattr(business, "youtube_video", None))
    coordinates = seo.extract_coordinates(fields["map_link"], site["default_latitude"], site["default_longitude"])
    map_query = fields["address"] or f"{coordinates['latitude']},{coordinates['longitude']}"

    vm: Dict[str, Any] = {
        "site": site,
        "business": fields,
        "theme_name": theme_name,
        "theme": get_theme(theme_name),
        "logo_alt": f"{fields['name']} logo - {fields['category']} in {site['city']}",
        "gallery": [
            {"index": index, "url": url, "alt": _image_alt(fields, site, index)}
            for index, url in enumerate(fields["images"])
        ],
        "services": _services(getattr(business, "services", None), fields, site),
        "offers": _offers(getattr(business, "special_offers", None)),
        "hours": _hours(fields["business_hours"]),
        "booking": _booking(getattr(business, "appointment_settings", None)),
        "video": {"id": youtube_id, "embed_url": f"https://www.youtube.com/embed/{youtube_id}"} if youtube_id else None,
        "amenities": [_text(item) for item in _list(getattr(business, "amenities", None)) if _text(item)],
        "reviews": _reviews(getattr(business, "reviews", None)),
        "faqs": _faqs(getattr(business, "faqs", None)),
        "social": _social(fields["social_links"]),
        "map": {
            **coordinates,
            "embed_url": f"https://www.google.com/maps?q={quote_plus(map_query)}&output=embed",
            "link": fields["map_link"] or f"https://www.google.com/maps?q={quote_plus(map_query)}",
        },
        "endpoints": {
            "track": f"{api_base_url}/analytics/track",
            "appointment": f"{api_base_url}/appointments/business/{fields['id']}",
        },
    }

    title = f"{fields['name']} - {fields['category']} in {site['city']}"
    vm["seo"] = {
        "title": f"{title} | {site['name']}",
        "social_title": title,
        "description": seo.meta_description(fields, site),
        "keywords": seo.build_keywords(fields, site, area),
        "author": fields["owner_name"] or fields["name"],
        "canonical_url": canonical_url,
        "alternate_urls": [
            url for url in (fields["subdomain_url"], fields["subdirectory_url"]) if url and url != canonical_url
        ],
        "image": fields["logo_url"] or (fields["images"][0] if fields["images"] else ""),
        "theme_color": vm["theme"]["themeColor"],
    }

    vm["sections"] = {
        "about": bool(fields["description"]),
        "location": bool(fields["address"]),
        "gallery": bool(vm["gallery"]),
        "services": bool(vm["services"]),
        "offers": bool(vm["offers"]),
        "hours": bool(vm["hours"]),
        "booking": vm["booking"] is not None,
        "video": vm["video"] is not None,
        "amenities": bool(vm["amenities"]),
        "reviews": bool(vm["reviews"]),
        "faq": bool(vm["faqs"]),
        "contact": True,
    }
    vm["nav"] = [
        {"id": section_id, "label": label}
        for section_id, label in NAV_SECTIONS
        if vm["sections"][section_id]
    ]

    vm["json_ld"] = seo.build_json_ld(vm)
    vm["client_config"] = {
        "businessId": fields["id"],
        "trackUrl": vm["endpoints"]["track"],
        "appointmentUrl": vm["endpoints"]["appointment"],
        "galleryImages": fields["images"],
        "carouselInterval": CAROUSEL_INTERVAL_MS,
    }
    return vm
