from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from influencer_admin.enums import OrderStatusEnum
from influencer_admin.errors import AppError
from influencer_admin.repositories import TableRepository, utcnow
from influencer_admin.result import Result

logger = logging.getLogger(__name__)


def _existing_history(order: dict[str, Any]) -> list[dict[str, Any]]:
    tracking = order.get("trackingInfo") or {}
    history = tracking.get("deliveryHistory") if isinstance(tracking, dict) else None
    return list(history) if isinstance(history, list) else []


def fulfillment_changes(order: dict[str, Any], fulfillment: dict[str, Any], *, now: datetime) -> dict[str, Any]:
    carrier = fulfillment.get("tracking_company") or None
    timestamp = now.isoformat()
    entry = {
        "status": "Order Fulfilled",
        "timestamp": timestamp,
        "location": carrier or "System",
        "description": f"Order has been fulfilled via {carrier}" if carrier else "Order has been fulfilled",
    }
    tracking_info = {
        "status": OrderStatusEnum.InTransit.value,
        "trackingNumber": fulfillment.get("tracking_number") or None,
        "carrier": carrier,
        "trackingUrl": fulfillment.get("tracking_url") or None,
        "estimatedDelivery": fulfillment.get("estimated_delivery_at") or None,
        "lastUpdated": timestamp,
        "deliveryHistory": [entry, *_existing_history(order)],
    }
    return {"status": OrderStatusEnum.InTransit.value, "trackingInfo": tracking_info}


def order_update_status(payload: dict[str, Any]) -> OrderStatusEnum | None:
    """Map an ``orders/updated`` payload onto an order status, if it implies one."""
    financial_status = str(payload.get("financial_status") or "").lower()
    if payload.get("cancelled_at") or payload.get("cancel_reason") or financial_status == "voided":
        return OrderStatusEnum.Cancelled
    if str(payload.get("fulfillment_status") or "").lower() == "fulfilled":
        return OrderStatusEnum.Delivered
    return None


def order_update_changes(order: dict[str, Any], new_status: OrderStatusEnum, *, now: datetime) -> dict[str, Any]:
    timestamp = now.isoformat()
    if new_status is OrderStatusEnum.Cancelled:
        entry = {
            "status": "Order Cancelled",
            "timestamp": timestamp,
            "location": "System",
            "description": "Order was cancelled in Shopify",
        }
    else:
        entry = {
            "status": "Order Delivered",
            "timestamp": timestamp,
            "location": "System",
            "description": "Order has been delivered",
        }
    current = order.get("trackingInfo")
    tracking_info = dict(current) if isinstance(current, dict) else {}
    tracking_info.update(
        {
            "status": new_status.value,
            "lastUpdated": timestamp,
            "deliveryHistory": [entry, *_existing_history(order)],
        }
    )
    return {"status": new_status.value, "trackingInfo": tracking_info}


async def _find_order(orders: TableRepository, shopify_order_id: str) -> dict[str, Any] | None:
    if not shopify_order_id:
        return None
    listing = await orders.find_by("shopifyOrderId", shopify_order_id)
    if not listing.items:
        logger.info("No order matches webhook", extra={"shopify_order_id": shopify_order_id})
        return None
    return listing.items[0]


async def apply_fulfillment_event(
    orders: TableRepository,
    payload: dict[str, Any],
    *,
    clock: Callable[[], datetime] = utcnow,
) -> Result[dict[str, Any] | None]:
    fulfillment = payload.get("fulfillment") if isinstance(payload.get("fulfillment"), dict) else {}
    shopify_order_id = str(fulfillment.get("order_id") or payload.get("order_id") or "")
    try:
        order = await _find_order(orders, shopify_order_id)
        if order is None:
            return Result.success(None)
        # top-level fulfillment payloads carry the tracking fields directly
        source = fulfillment or payload
        stored = await orders.update(order["id"], fulfillment_changes(order, source, now=clock()))
    except AppError as exc:
        return Result.failure(exc)
    return Result.success(stored.record)


async def apply_order_update_event(
    orders: TableRepository,
    payload: dict[str, Any],
    *,
    clock: Callable[[], datetime] = utcnow,
) -> Result[dict[str, Any] | None]:
    nested = payload.get("order") if isinstance(payload.get("order"), dict) else {}
    shopify_order_id = str(payload.get("id") or nested.get("id") or "")
    new_status = order_update_status(payload)
    if new_status is None:
        return Result.success(None)
    try:
        order = await _find_order(orders, shopify_order_id)
        if order is None:
            return Result.success(None)
        stored = await orders.update(order["id"], order_update_changes(order, new_status, now=clock()))
    except AppError as exc:
        return Result.failure(exc)
    return Result.success(stored.record)
