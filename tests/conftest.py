import copy
import os
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("BRMH_BASE_URL", "https://brmh.test")
os.environ.setdefault("SHOPIFY_STORE_DOMAIN", "example.myshopify.com")
os.environ.setdefault("SHOPIFY_ADMIN_TOKEN", "shpat_test_token")
os.environ.setdefault("SHOPIFY_WEBHOOK_SECRET", "webhook_secret")
os.environ.setdefault("PRODUCT_CACHE_DB_URL", "sqlite:///./test_product_cache.db")

from fastapi.testclient import TestClient  # noqa: E402

from influencer_admin.brmh_api import BrmhApiError  # noqa: E402
from influencer_admin.deps import get_brmh_client, get_memory_store, get_shopify_api  # noqa: E402
from influencer_admin.main import create_app  # noqa: E402
from influencer_admin.memory_store import MemoryStore  # noqa: E402
from influencer_admin.shopify_api import ShopifyApiError  # noqa: E402


class FakeBrmhClient:
    """In-process stand-in for the BRMH CRUD service, keyed by table name."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, dict]] = {}
        self.unavailable = False
        self.calls: list[tuple[str, str]] = []

    def seed(self, table: str, *items: dict) -> None:
        for item in items:
            self.tables.setdefault(table, {})[item["id"]] = copy.deepcopy(item)

    def _check(self, operation: str, table: str) -> None:
        self.calls.append((operation, table))
        if self.unavailable:
            raise BrmhApiError(message="BRMH unreachable")

    async def list_items(self, table: str, *, items_per_page: int) -> list[dict]:
        self._check("list", table)
        return [copy.deepcopy(item) for item in self.tables.get(table, {}).values()][:items_per_page]

    async def get_item(self, table: str, item_id: str) -> dict | None:
        self._check("get", table)
        item = self.tables.get(table, {}).get(item_id)
        return copy.deepcopy(item) if item is not None else None

    async def create_item(self, table: str, item: dict) -> str:
        self._check("create", table)
        self.tables.setdefault(table, {})[item["id"]] = copy.deepcopy(item)
        return item["id"]

    async def update_item(self, table: str, item_id: str, updates: dict) -> None:
        self._check("update", table)
        self.tables[table][item_id].update(copy.deepcopy(updates))

    async def delete_item(self, table: str, item_id: str) -> None:
        self._check("delete", table)
        self.tables.get(table, {}).pop(item_id, None)

    async def test_connection(self) -> bool:
        return not self.unavailable


class FakeShopifyApi:
    def __init__(self) -> None:
        self.products: list[dict] = []
        self.next_page_info: str | None = None
        self.prev_page_info: str | None = None
        self.order_id = "9001"
        self.fail = False
        self.list_calls: list[dict] = []
        self.created_orders: list[dict] = []

    def _check(self) -> None:
        if self.fail:
            raise ShopifyApiError(message="Shopify API call failed (500): boom")

    async def list_products(self, *, q=None, vendor=None, page_info=None, limit=100):
        self.list_calls.append({"q": q, "vendor": vendor, "page_info": page_info, "limit": limit})
        self._check()
        return copy.deepcopy(self.products), self.next_page_info, self.prev_page_info

    async def count_products(self, *, q=None, vendor=None) -> int:
        self._check()
        return len(self.products)

    async def create_order(self, **kwargs) -> str:
        self._check()
        self.created_orders.append(kwargs)
        return self.order_id


@pytest.fixture()
def fake_brmh():
    return FakeBrmhClient()


@pytest.fixture()
def memory_store():
    return MemoryStore()


@pytest.fixture()
def fake_shopify():
    return FakeShopifyApi()


@pytest.fixture()
def app(fake_brmh, memory_store, fake_shopify):
    application = create_app()
    application.dependency_overrides[get_brmh_client] = lambda: fake_brmh
    application.dependency_overrides[get_memory_store] = lambda: memory_store
    application.dependency_overrides[get_shopify_api] = lambda: fake_shopify
    return application


@pytest.fixture()
def api_client(app):
    with TestClient(app) as client:
        yield client
