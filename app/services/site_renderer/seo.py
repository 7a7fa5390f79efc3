"""
Search metadata for business pages: keywords, meta description and the
schema.org JSON-LD blocks. Pure functions over plain values.
"""
import re
from datetime import timedelta
from typing import Any, Dict, List, Optional

META_DESCRIPTION_LIMIT = 155

YOUTUBE_PATTERN = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")
YOUTUBE_ID_LENGTH = 11

COORDINATES_PATTERN = re.compile(r"@(-?\d+\.\d+),(-?\d+\.\d+)")

# Categories with a more specific schema.org type than LocalBusiness
SCHEMA_TYPES = {
    "Restaurant": "Restaurant",
    "Hotel": "Hotel",
    "Clinic": "MedicalBusiness",
    "Shop": "Store",
    "Library": "Library",
    "Bakery": "Bakery",
    "Pharmacy": "Pharmacy",
    "Bank": "BankOrCreditUnion",
    "Gym": "ExerciseGym",
    "Salon": "BeautySalon",
    "Spa": "DaySpa",
    "Travel Agency": "TravelAgency",
    "Real Estate": "RealEstateAgent",
    "Law Firm": "LegalService",
    "Accounting": "AccountingService",
    "Jewelry": "JewelryStore",
    "Electronics": "ElectronicsStore",
    "Furniture": "FurnitureStore",
    "Automobile": "AutoDealer",
    "Repair Services": "AutoRepair",
}
DEFAULT_SCHEMA_TYPE = "LocalBusiness"

SCHEMA_CONTEXT = "https://schema.org"
PRICE_VALID_DAYS = 365
GALLERY_SCHEMA_LIMIT = 20
IMAGE_SCHEMA_LIMIT = 10

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_WHITESPACE = re.compile(r"\s+")
_INSTAGRAM_PREFIX = re.compile(r"^https?://(www\.)?instagram\.com/", re.IGNORECASE)


def collapse_whitespace(text: Any) -> str:
    return _WHITESPACE.sub(" ", str(text or "")).strip()


def truncate(text: str, limit: int = META_DESCRIPTION_LIMIT) -> str:
    """Cut to ``limit`` characters including a trailing ``...``"""
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."


def extract_youtube_id(url: Any) -> Optional[str]:
    if not url:
        return None
    match = YOUTUBE_PATTERN.match(str(url).strip())
    if match and len(match.group(2)) == YOUTUBE_ID_LENGTH:
        return match.group(2)
    return None


def extract_coordinates(map_link: Any, default_latitude: str, default_longitude: str) -> Dict[str, str]:
    match = COORDINATES_PATTERN.search(str(map_link or ""))
    if match:
        return {"latitude": match.group(1), "longitude": match.group(2)}
    return {"latitude": default_latitude, "longitude": default_longitude}


def schema_type_for(category: str) -> str:
    return SCHEMA_TYPES.get(category, DEFAULT_SCHEMA_TYPE)


def instagram_url(handle_or_url: str) -> str:
    handle = _INSTAGRAM_PREFIX.sub("", handle_or_url.strip()).rstrip("/").lstrip("@")
    return f"https://instagram.com/{handle}"


def category_path(category: str) -> str:
    return _WHITESPACE.sub("-", category.lower())


def meta_description(business: Dict[str, Any], site: Dict[str, Any]) -> str:
    text = collapse_whitespace(business["description"])
    if not text:
        owner = f"Owner: {business['owner_name']}. " if business["owner_name"] else ""
        text = (
            f"{business['name']} - {business['category']} in {site['city']}. "
            f"{owner}Contact us for quality services."
        )
    return truncate(text)


def build_keywords(business: Dict[str, Any], site: Dict[str, Any], area: str) -> str:
    name, category, city = business["name"], business["category"], site["city"]
    candidates = [
        name,
        category,
        business["owner_name"],
        area,
        city,
        site["state"],
        f"{name} {city}",
        f"{category} {city}",
        f"{category} near me",
        f"{name} {area}",
        f"{city} business",
        f"{city} services",
        "online business",
        "local business",
        f"best {category} in {city}",
    ]
    keywords: List[str] = []
    seen = set()
    for keyword in candidates:
        keyword = collapse_whitespace(keyword)
        if keyword and keyword.lower() not in seen:
            seen.add(keyword.lower())
            keywords.append(keyword)
    return ", ".join(keywords)


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is empty so blocks never carry blank properties"""
    return {key: value for key, value in data.items() if value not in (None, "", [], {})}


def _same_as(social_links: Dict[str, str]) -> List[str]:
    links = []
    if social_links.get("website"):
        links.append(social_links["website"])
    if social_links.get("instagram"):
        links.append(instagram_url(social_links["instagram"]))
    if social_links.get("facebook"):
        links.append(social_links["facebook"])
    return links


def aggregate_rating(reviews: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Average of the numeric ratings, or None when no review carries one"""
    ratings = []
    for review in reviews:
        try:
            rating = float(review.get("rating"))
        except (TypeError, ValueError):
            continue
        if 1 <= rating <= 5:
            ratings.append(rating)
    if not ratings:
        return None
    return {
        "@type": "AggregateRating",
        "ratingValue": f"{sum(ratings) / len(ratings):.1f}",
        "reviewCount": str(len(ratings)),
        "bestRating": "5",
        "worstRating": "1",
    }


def opening_hours_specification(hours: Dict[str, Any]) -> List[Dict[str, str]]:
    specification = []
    for day in WEEKDAYS:
        entry = hours.get(day)
        if isinstance(entry, dict) and entry.get("open"):
            specification.append({
                "@type": "OpeningHoursSpecification",
                "dayOfWeek": f"https://schema.org/{day.capitalize()}",
                "opens": entry.get("start") or "09:00",
                "closes": entry.get("end") or "18:00",
            })
    return specification


def build_json_ld(vm: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    All structured data blocks for a page, in document order:
    LocalBusiness, Organization, BreadcrumbList, one Service per service,
    then VideoObject and ImageGallery when there is a video or images.
    """
    business, site, seo = vm["business"], vm["site"], vm["seo"]
    url = seo["canonical_url"]
    name, category, city = business["name"], business["category"], site["city"]
    telephone = business["mobile"]
    same_as = _same_as(business["social_links"])

    images = [image for image in [business["logo_url"]] + business["images"][:IMAGE_SCHEMA_LIMIT] if image]
    contact_point = _compact({
        "@type": "ContactPoint",
        "telephone": telephone,
        "contactType": "Customer Service",
        "areaServed": site["country_code"],
        "availableLanguage": ["en", "hi"],
    })

    local_business = _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": schema_type_for(category),
        "@id": url,
        "name": name,
        "alternateName": business["navbar_tagline"] or name,
        "description": collapse_whitespace(business["description"]) or seo["description"],
        "image": [
            {"@type": "ImageObject", "url": image, "caption": f"{name} - {category} image {index + 1} in {city}"}
            for index, image in enumerate(images)
        ],
        "logo": _compact({"@type": "ImageObject", "url": business["logo_url"], "caption": vm["logo_alt"]})
        if business["logo_url"] else None,
        "address": _compact({
            "@type": "PostalAddress",
            "streetAddress": business["address"],
            "addressLocality": city,
            "addressRegion": site["state"],
            "addressCountry": site["country_code"],
        }),
        "geo": {
            "@type": "GeoCoordinates",
            "latitude": vm["map"]["latitude"],
            "longitude": vm["map"]["longitude"],
        },
        "telephone": telephone,
        "email": business["email"],
        "url": url,
        "priceRange": "$$",
        "currenciesAccepted": "INR",
        "paymentAccepted": "Cash, Card, UPI, Digital Payment",
        "openingHoursSpecification": opening_hours_specification(business["business_hours"]),
        "areaServed": [
            {"@type": "City", "name": city},
            {"@type": "State", "name": site["state"]},
        ],
        "knowsAbout": [category, city, f"{category} services"],
        "aggregateRating": aggregate_rating(vm["reviews"]),
        "contactPoint": contact_point if telephone else None,
        "sameAs": same_as + [url] if same_as else None,
        "founder": {"@type": "Person", "name": business["owner_name"]} if business["owner_name"] else None,
        "additionalProperty": {"@type": "PropertyValue", "name": "WhatsApp", "value": business["whatsapp"]}
        if business["whatsapp"] else None,
    })

    organization = _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Organization",
        "name": name,
        "url": url,
        "logo": business["logo_url"],
        "contactPoint": contact_point if telephone else None,
        "sameAs": same_as,
    })

    breadcrumb = {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": 1, "name": "Home", "item": site["root_url"]},
            {
                "@type": "ListItem",
                "position": 2,
                "name": category,
                "item": f"{site['root_url']}/category/{category_path(category)}",
            },
            {"@type": "ListItem", "position": 3, "name": name, "item": url},
        ],
    }

    blocks = [local_business, organization, breadcrumb]
    blocks.extend(_service_schema(service, vm) for service in vm["services"])

    video = vm["video"]
    if video:
        blocks.append(_compact({
            "@context": SCHEMA_CONTEXT,
            "@type": "VideoObject",
            "name": f"{name} - {category} Video",
            "description": collapse_whitespace(business["description"]) or f"{name} video introduction",
            "thumbnailUrl": f"https://img.youtube.com/vi/{video['id']}/maxresdefault.jpg",
            "uploadDate": business["created_at"].isoformat() if business["created_at"] else None,
            "contentUrl": f"https://www.youtube.com/watch?v={video['id']}",
            "embedUrl": video["embed_url"],
            "publisher": _compact({
                "@type": "Organization",
                "name": name,
                "logo": {"@type": "ImageObject", "url": business["logo_url"]} if business["logo_url"] else None,
            }),
        }))

    if vm["gallery"]:
        blocks.append({
            "@context": SCHEMA_CONTEXT,
            "@type": "ImageGallery",
            "name": f"{name} Photo Gallery",
            "description": f"Photo gallery of {name} - {category} in {city}",
            "image": [
                {
                    "@type": "ImageObject",
                    "url": image["url"],
                    "caption": image["alt"],
                    "name": f"{name} - Image {image['index'] + 1}",
                }
                for image in vm["gallery"][:GALLERY_SCHEMA_LIMIT]
            ],
        })

    return blocks


def _service_schema(service: Dict[str, Any], vm: Dict[str, Any]) -> Dict[str, Any]:
    business, site, url = vm["business"], vm["site"], vm["seo"]["canonical_url"]
    updated_at = business["updated_at"]

    offer = None
    if service["price"]:
        offer = _compact({
            "@type": "Offer",
            "price": service["price"],
            "priceCurrency": "INR",
            "availability": "https://schema.org/InStock",
            "url": url,
            # Anchored to updated_at; rendering never reads the clock
            "priceValidUntil": (updated_at + timedelta(days=PRICE_VALID_DAYS)).date().isoformat()
            if updated_at else None,
        })

    return _compact({
        "@context": SCHEMA_CONTEXT,
        "@type": "Service",
        "serviceType": service["title"],
        "name": service["title"],
        "description": service["description"] or f"{service['title']} service by {business['name']} in {site['city']}",
        "provider": {"@type": "LocalBusiness", "name": business["name"], "url": url},
        "areaServed": {"@type": "City", "name": site["city"]},
        "availableChannel": _compact({
            "@type": "ServiceChannel",
            "serviceUrl": url,
            "servicePhone": business["mobile"],
        }),
        "offers": offer,
        "image": {"@type": "ImageObject", "url": service["image"], "caption": f"{service['title']} - {business['name']}"}
        if service["image"] else None,
    })
