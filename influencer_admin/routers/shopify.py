from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response

from influencer_admin.brmh_api import BrmhTableClient
from influencer_admin.catalog import filter_by_title, normalize_products
from influencer_admin.config import settings
from influencer_admin.deps import get_brmh_client, get_shopify_api, mark_degraded
from influencer_admin.errors import AppError, RemoteUnavailable
from influencer_admin.schemas import (
    CatalogProduct,
    CommerceOrderRequest,
    CommerceOrderResponse,
    ProductCountResponse,
    ProductSearchResponse,
)
from influencer_admin.security import require_admin_token
from influencer_admin.shopify_api import ShopifyApiClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shopify", tags=["shopify"], dependencies=[Depends(require_admin_token)])


async def _mirrored_products(brmh: BrmhTableClient, *, q: str | None, limit: int) -> list[CatalogProduct]:
    items = await brmh.list_items(settings.BRMH_PRODUCTS_TABLE, items_per_page=limit)
    return filter_by_title(normalize_products(items), q)


@router.get("/products", response_model=ProductSearchResponse)
async def list_products(
    response: Response,
    q: str | None = None,
    vendor: str | None = None,
    page_info: str | None = None,
    limit: int = Query(default=50, ge=1, le=250),
    shopify_api: ShopifyApiClient = Depends(get_shopify_api),
    brmh: BrmhTableClient = Depends(get_brmh_client),
):
    try:
        raw_products, next_page_info, prev_page_info = await shopify_api.list_products(
            q=q,
            vendor=vendor,
            page_info=page_info,
            limit=limit,
        )
    except RemoteUnavailable as exc:
        logger.warning("Shopify product search failed, using BRMH mirror", extra={"error": exc.message})
        mark_degraded(response, True)
        return ProductSearchResponse(products=await _mirrored_products(brmh, q=q, limit=limit))

    return ProductSearchResponse(
        products=normalize_products(raw_products),
        nextPageInfo=next_page_info,
        prevPageInfo=prev_page_info,
    )


@router.get("/products/count", response_model=ProductCountResponse)
async def count_products(
    response: Response,
    q: str | None = None,
    vendor: str | None = None,
    shopify_api: ShopifyApiClient = Depends(get_shopify_api),
    brmh: BrmhTableClient = Depends(get_brmh_client),
):
    try:
        count = await shopify_api.count_products(q=q, vendor=vendor)
    except RemoteUnavailable as exc:
        logger.warning("Shopify product count failed, using BRMH mirror", extra={"error": exc.message})
        mark_degraded(response, True)
        products = await _mirrored_products(brmh, q=q, limit=settings.BRMH_PAGE_SIZE)
        return ProductCountResponse(count=len(products))
    return ProductCountResponse(count=count)


@router.post("/orders", response_model=CommerceOrderResponse)
async def create_commerce_order(
    payload: CommerceOrderRequest,
    shopify_api: ShopifyApiClient = Depends(get_shopify_api),
):
    try:
        order_id = await shopify_api.create_order(
            line_items=[item.model_dump(mode="json") for item in payload.lineItems],
            email=payload.email,
            shipping_address=payload.shippingAddress.model_dump(exclude_none=True) if payload.shippingAddress else None,
            tags=payload.tags,
            note=payload.note,
            financial_status=payload.financialStatus,
            fulfillment_status=payload.fulfillmentStatus,
        )
    except RemoteUnavailable as exc:
        logger.warning("Shopify order creation failed", extra={"error": exc.message})
        raise AppError(exc.message, status_code=502) from exc
    return CommerceOrderResponse(orderId=order_id)
