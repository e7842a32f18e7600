from __future__ import annotations

import pytest

from influencer_admin.client.db import create_session_factory
from influencer_admin.client.product_cache import ProductSearchCache, cache_key


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def db_url(tmp_path):
    return f"sqlite:///{tmp_path}/cache.db"


def test_cache_key_trims_and_defaults_to_all():
    assert cache_key("  mug ") == "shopify_products_cache_mug"
    assert cache_key("") == "shopify_products_cache_all"
    assert cache_key(None) == "shopify_products_cache_all"


def test_fresh_entry_is_returned(db_url):
    clock = FakeClock()
    cache = ProductSearchCache(create_session_factory(db_url), ttl_seconds=300, clock=clock)
    products = [{"id": 1, "title": "Blue Mug", "variants": []}]

    cache.set("mug", products)
    clock.now += 299

    cached = cache.get(" mug ")
    assert cached is not None
    assert cached.products == products
    assert cached.total_count == 1
    assert cached.timestamp == 1_700_000_000.0


def test_stale_entry_is_evicted(db_url):
    clock = FakeClock()
    cache = ProductSearchCache(create_session_factory(db_url), ttl_seconds=300, clock=clock)
    cache.set("mug", [{"id": 1}])

    clock.now += 301

    assert cache.get("mug") is None
    clock.now -= 301
    assert cache.get("mug") is None


def test_set_overwrites_existing_entry(db_url):
    clock = FakeClock()
    cache = ProductSearchCache(create_session_factory(db_url), ttl_seconds=300, clock=clock)
    cache.set("", [{"id": 1}])
    clock.now += 10
    cache.set("", [{"id": 1}, {"id": 2}], 2)

    cached = cache.get(None)
    assert cached.total_count == 2
    assert cached.timestamp == clock.now


def test_clear_removes_every_entry(db_url):
    cache = ProductSearchCache(create_session_factory(db_url), ttl_seconds=300, clock=FakeClock())
    cache.set("mug", [{"id": 1}])
    cache.set("shirt", [{"id": 2}])

    cache.clear()

    assert cache.get("mug") is None
    assert cache.get("shirt") is None


def test_entries_survive_new_session_factory(db_url):
    clock = FakeClock()
    ProductSearchCache(create_session_factory(db_url), ttl_seconds=300, clock=clock).set("mug", [{"id": 1}])

    reopened = ProductSearchCache(create_session_factory(db_url), ttl_seconds=300, clock=clock)

    assert reopened.get("mug").products == [{"id": 1}]
