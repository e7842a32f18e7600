from __future__ import annotations

import asyncio

import httpx
import pytest

from influencer_admin.client.admin_api import AdminApiClient, AdminApiError
from influencer_admin.client.app_state import AppStore
from influencer_admin.config import settings


def _store(app) -> AppStore:
    return AppStore(AdminApiClient("http://testserver", transport=httpx.ASGITransport(app=app)))


def test_load_fetches_everything_once(app, fake_brmh):
    fake_brmh.seed(
        settings.BRMH_INFLUENCERS_TABLE,
        {"id": "a", "name": "A", "role": "Completed"},
        {"id": "b", "name": "B", "role": "Approved"},
    )
    fake_brmh.seed(
        settings.BRMH_TEMPLATES_TABLE,
        {"id": "t-1", "type": "whatsapp", "message": "Hi {name}", "workflowCategory": "onboarding"},
    )
    store = _store(app)

    async def scenario():
        await store.load()
        fake_brmh.seed(settings.BRMH_INFLUENCERS_TABLE, {"id": "c", "name": "C"})
        await store.load()

    asyncio.run(scenario())

    assert store.loaded
    assert [item["id"] for item in store.influencers] == ["a", "b"]
    assert store.message_templates[0]["workflowCategory"] == "onboarding"
    assert store.stats.totalInfluencers == 2
    assert store.stats.completionRate == "50%"
    assert not store.degraded


def test_load_reports_degraded_fallback(app, fake_brmh):
    fake_brmh.unavailable = True
    store = _store(app)

    asyncio.run(store.load())

    assert store.degraded
    assert store.influencers == []


def test_influencer_lifecycle(app, fake_brmh):
    store = _store(app)

    async def scenario():
        await store.load()
        created = await store.add_influencer({"name": "Jane Doe", "email": "jane@x.com"})
        assert store.stats.totalInfluencers == 1
        await store.update_influencer(created["id"], {"status": "Completed"})
        assert store.stats.completionRate == "100%"
        await store.delete_influencer(created["id"])
        return created

    created = asyncio.run(scenario())

    assert store.influencers == []
    assert store.stats.totalInfluencers == 0
    assert created["id"] not in fake_brmh.tables[settings.BRMH_INFLUENCERS_TABLE]


def test_rejected_write_leaves_state_untouched(app):
    store = _store(app)

    async def scenario():
        await store.load()
        with pytest.raises(AdminApiError) as exc_info:
            await store.add_influencer({"email": "jane@x.com"})
        return exc_info.value

    error = asyncio.run(scenario())

    assert error.status_code == 400
    assert error.message == "Missing required field: name"
    assert store.influencers == []


def test_add_order_refreshes_from_server(app, fake_brmh):
    fake_brmh.seed(
        settings.BRMH_ORDERS_TABLE,
        {"id": "o-0", "influencerId": "inf-9", "shopifyOrderId": "8000", "status": "Completed", "data": {}},
    )
    store = _store(app)

    async def scenario():
        await store.load()
        return await store.add_order({"influencerId": "inf-1", "shopifyOrderId": "9001"})

    created = asyncio.run(scenario())

    assert {order["id"] for order in store.orders} == {"o-0", created["id"]}
    assert store.stats.activeOrders == 1


def test_content_updates_feed_pending_count(app):
    store = _store(app)

    async def scenario():
        await store.load()
        created = await store.add_content(
            {
                "type": "Reel",
                "s3Link": "s3://bucket/reel.mp4",
                "status": "PendingReview",
                "influencerId": "inf-1",
                "orderId": "o-1",
            }
        )
        assert store.stats.pendingContent == 1
        await store.update_content(created["id"], {"status": "Approved"})

    asyncio.run(scenario())

    assert store.stats.pendingContent == 0
    assert store.content[0]["status"] == "Approved"
