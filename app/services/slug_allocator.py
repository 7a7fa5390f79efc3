import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from app.models.models import SlugRegistry
from app.utils.slug import base_slug, is_valid_slug, strip_slug_input, with_suffix

logger = logging.getLogger(__name__)

# Suffixes scanned when proposing alternatives for a taken slug
SUGGESTION_RANGE = range(1, 11)


class SlugAllocator:
    """
    Picks slugs that are not yet taken.

    Availability is advisory: two requests can pick the same free slug. The
    unique constraint on insert settles the race and the store asks for another
    slug, passing the lost one in ``exclude``.
    """

    def __init__(self, db: Session):
        self.db = db

    def slug_exists(self, slug: str) -> bool:
        return self.db.query(SlugRegistry.id).filter(SlugRegistry.slug == slug).first() is not None

    def is_available(self, slug: str) -> bool:
        return is_valid_slug(slug) and not self.slug_exists(slug)

    def allocate(self, candidate_name: str, preferred: Optional[str] = None, exclude: Iterable[str] = ()) -> str:
        excluded = set(exclude)

        wanted = strip_slug_input(preferred)
        if wanted and wanted not in excluded and self.is_available(wanted):
            return wanted

        base = base_slug(candidate_name)
        slug = base
        counter = 0
        while slug in excluded or self.slug_exists(slug):
            counter += 1
            slug = with_suffix(base, counter)

        if counter:
            logger.debug(f"Slug {base!r} taken, allocated {slug!r}")
        return slug

    def suggest_alternatives(self, slug: str, n: int = 3) -> List[str]:
        """Free ``slug1``..``slug10`` variants, nothing is reserved"""
        suggestions = []
        for counter in SUGGESTION_RANGE:
            if len(suggestions) >= n:
                break
            candidate = with_suffix(slug, counter)
            if not self.slug_exists(candidate):
                suggestions.append(candidate)
        return suggestions
