from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from influencer_admin.deps import (
    get_content_repository,
    get_influencer_repository,
    get_order_repository,
    mark_degraded,
)
from influencer_admin.repositories import TableRepository
from influencer_admin.schemas import Stats
from influencer_admin.security import require_admin_token
from influencer_admin.stats import compute_stats

router = APIRouter(prefix="/stats", tags=["stats"], dependencies=[Depends(require_admin_token)])


@router.get("", response_model=Stats)
async def get_stats(
    response: Response,
    influencers: TableRepository = Depends(get_influencer_repository),
    orders: TableRepository = Depends(get_order_repository),
    content: TableRepository = Depends(get_content_repository),
):
    influencer_listing = await influencers.list()
    order_listing = await orders.list()
    content_listing = await content.list()
    mark_degraded(
        response,
        influencer_listing.degraded or order_listing.degraded or content_listing.degraded,
    )
    return compute_stats(influencer_listing.items, order_listing.items, content_listing.items)
