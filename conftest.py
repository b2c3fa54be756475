import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttle counters and OTP challenges live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def catalog(db):
    from core.services.catalog import seed_default_catalog
    seed_default_catalog()
