from __future__ import annotations

from fastapi import Depends, Response

from influencer_admin.brmh_api import BrmhTableClient
from influencer_admin.config import settings
from influencer_admin.memory_store import MemoryStore
from influencer_admin.repositories import TableRepository
from influencer_admin.shopify_api import ShopifyApiClient
from influencer_admin.tables import InfluencerCodec, OrderCodec

_brmh_client = BrmhTableClient()
_memory_store = MemoryStore()
_shopify_api = ShopifyApiClient()


def get_brmh_client() -> BrmhTableClient:
    return _brmh_client


def get_memory_store() -> MemoryStore:
    return _memory_store


def get_shopify_api() -> ShopifyApiClient:
    return _shopify_api


def get_influencer_repository(
    client: BrmhTableClient = Depends(get_brmh_client),
    memory: MemoryStore = Depends(get_memory_store),
) -> TableRepository:
    return TableRepository(
        client=client,
        memory=memory,
        table=settings.BRMH_INFLUENCERS_TABLE,
        entity="influencers",
        label="Influencer",
        page_size=settings.BRMH_PAGE_SIZE,
        codec=InfluencerCodec(),
    )


def get_order_repository(
    client: BrmhTableClient = Depends(get_brmh_client),
    memory: MemoryStore = Depends(get_memory_store),
) -> TableRepository:
    return TableRepository(
        client=client,
        memory=memory,
        table=settings.BRMH_ORDERS_TABLE,
        entity="orders",
        label="Order",
        page_size=settings.BRMH_ORDERS_PAGE_SIZE,
        codec=OrderCodec(),
    )


def get_content_repository(
    client: BrmhTableClient = Depends(get_brmh_client),
    memory: MemoryStore = Depends(get_memory_store),
) -> TableRepository:
    return TableRepository(
        client=client,
        memory=memory,
        table=settings.BRMH_CONTENT_TABLE,
        entity="content",
        label="Content",
        page_size=settings.BRMH_PAGE_SIZE,
    )


def get_template_repository(
    client: BrmhTableClient = Depends(get_brmh_client),
    memory: MemoryStore = Depends(get_memory_store),
) -> TableRepository:
    return TableRepository(
        client=client,
        memory=memory,
        table=settings.BRMH_TEMPLATES_TABLE,
        entity="message_templates",
        label="Message template",
        page_size=settings.BRMH_PAGE_SIZE,
    )


DEGRADED_HEADER = "X-Degraded"


def mark_degraded(response: Response, degraded: bool) -> None:
    if degraded:
        response.headers[DEGRADED_HEADER] = "true"
