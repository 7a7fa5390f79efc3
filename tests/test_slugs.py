"""
Tests for slug generation and allocation
"""
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.database import Base
from app.models.models import Business, SlugRegistry
from app.services.business_store import BusinessStore
from app.services.slug_allocator import SlugAllocator
from app.utils.slug import SLUG_PATTERN, base_slug, is_valid_slug, slugify, with_suffix


@pytest.mark.unit
class TestSlugHelpers:
    """Tests for the pure slug helpers"""

    def test_slugify_strips_everything_but_alphanumerics(self):
        assert slugify("A & B Shop") == "abshop"
        assert slugify("  Café   Ganga-View 24x7 ") == "cafgangaview24x7"

    def test_base_slug_pads_short_names(self):
        assert base_slug("Jo") == "josite"
        assert base_slug("!!!") == "site"
        assert SLUG_PATTERN.match(base_slug("X"))

    def test_base_slug_truncates_long_names(self):
        slug = base_slug("a" * 80)
        assert len(slug) == 50

    def test_with_suffix_stays_within_limit(self):
        assert with_suffix("abshop", 2) == "abshop2"
        slug = with_suffix("a" * 50, 12)
        assert len(slug) == 50
        assert slug.endswith("12")

    def test_is_valid_slug(self):
        assert is_valid_slug("abshop")
        assert not is_valid_slug("ab")
        assert not is_valid_slug("ab-shop")
        assert not is_valid_slug("ABSHOP")
        assert not is_valid_slug(None)


@pytest.mark.unit
class TestSlugAllocator:
    """Tests for allocating free slugs"""

    def test_allocate_from_name(self, db):
        assert SlugAllocator(db).allocate("A & B Shop") == "abshop"

    def test_allocate_appends_counter_when_taken(self, db, test_business):
        allocator = SlugAllocator(db)
        assert test_business.slug == "abshop"
        assert allocator.allocate("A & B Shop") == "abshop1"

    def test_preferred_slug_used_when_free(self, db):
        assert SlugAllocator(db).allocate("A & B Shop", preferred="  myshop ") == "myshop"

    def test_preferred_slug_used_verbatim(self, db):
        assert SlugAllocator(db).allocate("A & B Shop", preferred="MyShop") == "abshop"

    def test_preferred_slug_ignored_when_invalid_or_taken(self, db, test_business):
        allocator = SlugAllocator(db)
        assert allocator.allocate("Other Shop", preferred="my-shop") == "othershop"
        assert allocator.allocate("Other Shop", preferred="abshop") == "othershop"

    def test_excluded_slugs_skipped(self, db):
        assert SlugAllocator(db).allocate("A & B Shop", exclude=["abshop", "abshop1"]) == "abshop2"

    def test_suggest_alternatives(self, db, test_business):
        db.add(SlugRegistry(slug="abshop1"))
        db.commit()
        assert SlugAllocator(db).suggest_alternatives("abshop") == ["abshop2", "abshop3", "abshop4"]

    def test_slug_never_reused_after_delete(self, db, test_business):
        db.delete(test_business)
        db.commit()
        assert SlugAllocator(db).slug_exists("abshop")
        assert SlugAllocator(db).allocate("A & B Shop") == "abshop1"


@pytest.mark.unit
class TestSlugRace:
    """Tests for slug races settled by the unique constraint"""

    def test_lost_race_retries_with_new_slug(self, db, test_business, business_data, monkeypatch):
        # Availability check misses the existing row, as if another request inserted it meanwhile
        calls = []
        original = SlugAllocator.slug_exists

        def stale_exists(self, slug):
            calls.append(slug)
            return False if len(calls) == 1 else original(self, slug)

        monkeypatch.setattr(SlugAllocator, "slug_exists", stale_exists)
        business = BusinessStore(db).create({**business_data, "email": None})

        assert business.slug == "abshop1"
        assert db.query(Business).count() == 2

    def test_concurrent_creates_get_distinct_slugs(self, tmp_path):
        engine = create_engine(
            f"sqlite:///{tmp_path / 'race.db'}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        Base.metadata.create_all(bind=engine)
        Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        def register(index):
            session = Session()
            try:
                business = BusinessStore(session).create({
                    "business_name": "Ganga Sweets",
                    "category": "sweets",
                    "address": f"{index} Dashashwamedh Road",
                    "description": "Fresh sweets every morning.",
                })
                return business.slug
            finally:
                session.close()

        try:
            with ThreadPoolExecutor(max_workers=4) as pool:
                slugs = list(pool.map(register, range(8)))
        finally:
            engine.dispose()

        assert len(set(slugs)) == 8
        assert all(SLUG_PATTERN.match(slug) for slug in slugs)
        assert "gangasweets" in slugs
