from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import APIRouter, Depends, Request

from influencer_admin.deps import get_order_repository
from influencer_admin.errors import SignatureInvalid
from influencer_admin.order_tracking import apply_fulfillment_event, apply_order_update_event
from influencer_admin.repositories import TableRepository
from influencer_admin.security import verify_webhook_hmac

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


async def _verified_payload(request: Request) -> dict[str, Any] | None:
    body = await request.body()
    if not verify_webhook_hmac(body=body, supplied_hmac=request.headers.get("x-shopify-hmac-sha256")):
        raise SignatureInvalid("Invalid webhook HMAC")
    try:
        payload = orjson.loads(body)
    except orjson.JSONDecodeError:
        logger.warning("Webhook body is not valid JSON", extra={"path": request.url.path})
        return None
    if not isinstance(payload, dict):
        logger.warning("Webhook body must be a JSON object", extra={"path": request.url.path})
        return None
    return payload


@router.post("/fulfillment")
async def fulfillment_webhook(
    request: Request,
    orders: TableRepository = Depends(get_order_repository),
) -> dict[str, bool]:
    payload = await _verified_payload(request)
    if payload is not None:
        result = await apply_fulfillment_event(orders, payload)
        if not result.ok:
            logger.warning("Fulfillment webhook processing failed", extra={"error": result.error.message})
        elif result.value is not None:
            logger.info("Order marked in transit", extra={"order_id": result.value.get("id")})
    return {"ok": True}


@router.post("/order-updated")
async def order_updated_webhook(
    request: Request,
    orders: TableRepository = Depends(get_order_repository),
) -> dict[str, bool]:
    payload = await _verified_payload(request)
    if payload is not None:
        result = await apply_order_update_event(orders, payload)
        if not result.ok:
            logger.warning("Order-updated webhook processing failed", extra={"error": result.error.message})
        elif result.value is not None:
            logger.info(
                "Order status updated from webhook",
                extra={"order_id": result.value.get("id"), "status": result.value.get("status")},
            )
    return {"ok": True}
