"""
Business category taxonomy.

The category set is closed and mirrored by the ``ck_businesses_category``
check constraint. ``normalize_category`` is the single place that turns
free-form input into a member of the set; it runs on every write path.
"""
import logging
from typing import Any, List

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Services"

CATEGORIES = (
    "Shop", "Restaurant", "Hotel", "Clinic", "Library", "Services", "Temple",
    "School", "College", "Gym", "Salon", "Spa", "Pharmacy", "Bank",
    "Travel Agency", "Real Estate", "Law Firm", "Accounting", "IT Services",
    "Photography", "Event Management", "Catering", "Bakery", "Jewelry",
    "Fashion", "Electronics", "Furniture", "Automobile", "Repair Services",
    "Education", "Healthcare", "Beauty", "Fitness", "Entertainment", "Tourism",
    "Food & Beverage", "Retail", "Wholesale", "Manufacturing", "Construction",
    "Other",
)

# Keys a client may wrap the category value in
WRAPPER_KEYS = ("value", "name", "category", "label")

# Lower-case aliases; every category maps from its own lower-case spelling too
CATEGORY_SYNONYMS = {
    **{category.lower(): category for category in CATEGORIES},
    "shops": "Shop", "store": "Shop", "stores": "Shop",
    "restaurants": "Restaurant", "food": "Restaurant", "dining": "Restaurant",
    "cafe": "Restaurant", "dhaba": "Restaurant",
    "hotels": "Hotel", "lodging": "Hotel", "accommodation": "Hotel",
    "guest house": "Hotel", "guesthouse": "Hotel",
    "clinics": "Clinic", "hospital": "Clinic", "hospitals": "Clinic",
    "medical": "Clinic", "doctor": "Clinic",
    "libraries": "Library", "book": "Library", "books": "Library",
    "service": "Services",
    "temples": "Temple", "schools": "School", "colleges": "College",
    "gyms": "Gym", "salons": "Salon", "parlour": "Salon", "parlor": "Salon",
    "spas": "Spa", "chemist": "Pharmacy", "pharmacies": "Pharmacy",
    "medical store": "Pharmacy", "banks": "Bank",
    "travel": "Travel Agency", "travel agencies": "Travel Agency",
    "realestate": "Real Estate", "property": "Real Estate",
    "law": "Law Firm", "lawyer": "Law Firm", "advocate": "Law Firm",
    "accountant": "Accounting", "ca": "Accounting",
    "it": "IT Services", "software": "IT Services",
    "photographer": "Photography", "studio": "Photography",
    "events": "Event Management", "caterer": "Catering",
    "bakeries": "Bakery", "sweets": "Bakery", "jewellery": "Jewelry",
    "jeweller": "Jewelry", "boutique": "Fashion", "clothing": "Fashion",
    "mobile": "Electronics", "electronic": "Electronics",
    "automobiles": "Automobile", "garage": "Repair Services",
    "repair": "Repair Services", "coaching": "Education",
    "tuition": "Education", "health": "Healthcare", "yoga": "Fitness",
    "tours": "Tourism", "food and beverage": "Food & Beverage",
    "general": "Services", "misc": "Other", "miscellaneous": "Other",
    "others": "Other",
}


def _unwrap(raw: Any) -> Any:
    if isinstance(raw, dict):
        for key in WRAPPER_KEYS:
            value = raw.get(key)
            if value:
                return value
        return None
    return raw


def normalize_category(raw: Any) -> str:
    """
    Map any category input onto the closed category set.

    Accepts a bare string, a dict carrying the value under one of
    ``WRAPPER_KEYS``, or nothing. Unknown input degrades to
    ``DEFAULT_CATEGORY`` instead of raising.
    """
    value = _unwrap(raw)
    text = str(value).strip() if value is not None else ""

    if is_valid_category(text):
        return text

    mapped = CATEGORY_SYNONYMS.get(text.lower())
    if mapped:
        logger.debug(f"Category mapped {text!r} -> {mapped!r}")
        return mapped

    logger.debug(f"Unknown category {text!r}, using {DEFAULT_CATEGORY!r}")
    return DEFAULT_CATEGORY


def is_valid_category(value: Any) -> bool:
    return isinstance(value, str) and value in CATEGORIES


def get_categories() -> List[str]:
    """Get all categories in display order"""
    return list(CATEGORIES)
