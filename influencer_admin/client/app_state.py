from __future__ import annotations

import logging
from typing import Any

from influencer_admin.client.admin_api import AdminApiClient
from influencer_admin.schemas import Stats
from influencer_admin.stats import compute_stats

logger = logging.getLogger(__name__)


class AppStore:
    """Dashboard state shared by every screen of the admin client.

    Lists are replaced or patched only after the server has confirmed a
    write, so the held state never shows a record the server rejected.
    """

    def __init__(self, api: AdminApiClient) -> None:
        self.api = api
        self.influencers: list[dict[str, Any]] = []
        self.orders: list[dict[str, Any]] = []
        self.content: list[dict[str, Any]] = []
        self.message_templates: list[dict[str, Any]] = []
        self.stats = Stats(totalInfluencers=0, activeOrders=0, pendingContent=0, completionRate="0%")
        self.degraded = False
        self.loaded = False

    async def load(self) -> None:
        if self.loaded:
            return
        self.influencers = await self.api.list_influencers()
        degraded = self.api.degraded
        self.orders = await self.api.list_orders()
        degraded = degraded or self.api.degraded
        self.content = await self.api.list_content()
        degraded = degraded or self.api.degraded
        self.message_templates = await self.api.list_message_templates()
        self.degraded = degraded or self.api.degraded
        self.loaded = True
        self.refresh_stats()
        logger.info(
            "Dashboard state loaded",
            extra={"influencers": len(self.influencers), "orders": len(self.orders), "degraded": self.degraded},
        )

    def find_influencer(self, influencer_id: str) -> dict[str, Any] | None:
        for influencer in self.influencers:
            if influencer.get("id") == influencer_id:
                return influencer
        return None

    async def add_influencer(self, payload: dict[str, Any]) -> dict[str, Any]:
        created = await self.api.create_influencer(payload)
        self.influencers.append(created)
        self.refresh_stats()
        return created

    async def update_influencer(self, influencer_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        updated = await self.api.update_influencer(influencer_id, changes)
        self.influencers = [updated if item.get("id") == influencer_id else item for item in self.influencers]
        self.refresh_stats()
        return updated

    async def delete_influencer(self, influencer_id: str) -> bool:
        await self.api.delete_influencer(influencer_id)
        self.influencers = [item for item in self.influencers if item.get("id") != influencer_id]
        self.refresh_stats()
        return True

    async def add_order(self, payload: dict[str, Any]) -> dict[str, Any]:
        created = await self.api.create_order(payload)
        # the server list is authoritative for ordering and for records created elsewhere
        await self.refresh_orders()
        if not any(order.get("id") == created.get("id") for order in self.orders):
            self.orders.append(created)
            self.refresh_stats()
        return created

    async def refresh_orders(self) -> None:
        self.orders = await self.api.list_orders()
        self.degraded = self.api.degraded
        self.refresh_stats()

    async def add_content(self, payload: dict[str, Any]) -> dict[str, Any]:
        created = await self.api.create_content(payload)
        self.content.append(created)
        self.refresh_stats()
        return created

    async def update_content(self, content_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        updated = await self.api.update_content(content_id, changes)
        self.content = [updated if item.get("id") == content_id else item for item in self.content]
        self.refresh_stats()
        return updated

    def refresh_stats(self) -> Stats:
        self.stats = compute_stats(self.influencers, self.orders, self.content)
        return self.stats
