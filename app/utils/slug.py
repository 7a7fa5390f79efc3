"""
Pure slug helpers. Nothing here touches the database; availability checks
live in ``app.services.slug_allocator``.
"""
import re
from typing import Any

SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 50
SLUG_PATTERN = re.compile(r"^[a-z0-9]{3,50}$")

# Used when a name has no usable characters at all
FALLBACK_SLUG = "site"

_WHITESPACE = re.compile(r"\s+")
_NOT_SLUG_CHAR = re.compile(r"[^a-z0-9]")


def is_valid_slug(value: Any) -> bool:
    return isinstance(value, str) and bool(SLUG_PATTERN.match(value))


def strip_slug_input(value: Any) -> str:
    """Trim user supplied slug text; case and characters are kept as given"""
    if value is None:
        return ""
    return str(value).strip()


def clean_slug_input(value: Any) -> str:
    """Lower-case and trim user supplied slug text without altering its characters"""
    if value is None:
        return ""
    return str(value).strip().lower()


def slugify(name: Any) -> str:
    """
    Reduce a business name to ``[a-z0-9]`` only.

    "A & B Shop" -> "abshop"
    """
    text = _WHITESPACE.sub(" ", str(name or "").lower()).strip()
    return _NOT_SLUG_CHAR.sub("", text)[:SLUG_MAX_LENGTH]


def base_slug(name: Any) -> str:
    """Slugify and pad so the result always satisfies ``SLUG_PATTERN``"""
    slug = slugify(name)
    if not slug:
        return FALLBACK_SLUG
    if len(slug) < SLUG_MIN_LENGTH:
        slug = f"{slug}{FALLBACK_SLUG}"
    return slug[:SLUG_MAX_LENGTH]


def with_suffix(base: str, counter: int) -> str:
    """Append a numeric suffix, shortening the base so the slug stays within the max length"""
    suffix = str(counter)
    return f"{base[:SLUG_MAX_LENGTH - len(suffix)]}{suffix}"
