"""
Shared fixtures: fresh stores seeded with the demo mentor, mentee, sessions and webinars.
"""

from datetime import datetime, timezone

import pytest

from mentorverse.services.booking.booking_service import BookingRules, BookingService
from mentorverse.services.cache.session_cache import SessionCache
from mentorverse.services.catalog.catalog_service import CatalogService
from mentorverse.services.store.profile_store import ProfileStore
from mentorverse.services.store.seed import seed_demo_data

FIXED_NOW = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
TEST_MEETING_LINK = "https://meet.google.com/abc-defg-hij"


@pytest.fixture
def store() -> ProfileStore:
    return ProfileStore()


@pytest.fixture
def catalog() -> CatalogService:
    return CatalogService()


@pytest.fixture
def seeded_store(store, catalog) -> ProfileStore:
    """Store and catalog loaded with the demo records (slot1 open, slot2 booked by mentee1)"""
    seed_demo_data(store, catalog, now=FIXED_NOW)
    return store


@pytest.fixture
def cache() -> SessionCache:
    return SessionCache(redis_url="")


@pytest.fixture
def booking_svc(seeded_store) -> BookingService:
    return BookingService(
        store=seeded_store,
        rules=BookingRules(),
        meeting_link_factory=lambda: TEST_MEETING_LINK,
        clock=lambda: FIXED_NOW,
    )
