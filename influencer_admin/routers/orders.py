from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Response, status

from influencer_admin.config import settings
from influencer_admin.deps import get_order_repository, mark_degraded
from influencer_admin.enums import OrderStatusEnum
from influencer_admin.errors import NotFound
from influencer_admin.repositories import TableRepository, utcnow
from influencer_admin.schemas import Order, OrderCreate, OrderUpdate, Shipment, ShipmentResponse
from influencer_admin.security import require_admin_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"], dependencies=[Depends(require_admin_token)])

_TRACKED_STATUSES = {OrderStatusEnum.InTransit.value, OrderStatusEnum.Delivered.value}


def build_shipment(order: dict[str, Any]) -> Shipment:
    tracking = order.get("trackingInfo") or {}
    order_status = order.get("status") or OrderStatusEnum.Created.value
    # carrier details are only meaningful once the order has shipped
    tracked = order_status in _TRACKED_STATUSES
    return Shipment(
        status=order_status,
        trackingNumber=(tracking.get("trackingNumber") or None) if tracked else None,
        carrier=(tracking.get("carrier") or None) if tracked else None,
        trackingUrl=(tracking.get("trackingUrl") or None) if tracked else None,
        estimatedDelivery=(tracking.get("estimatedDelivery") or None) if tracked else None,
        deliveryHistory=tracking.get("deliveryHistory") or [],
        lastUpdated=order.get("updatedAt") or utcnow(),
        orderStatus=order_status,
    )


def missing_shipment() -> Shipment:
    return Shipment(status="Order Not Found", lastUpdated=utcnow(), orderStatus="Unknown")


@router.get("", response_model=list[Order])
async def list_orders(
    response: Response,
    repository: TableRepository = Depends(get_order_repository),
):
    listing = await repository.list()
    mark_degraded(response, listing.degraded)
    return listing.items


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    response: Response,
    repository: TableRepository = Depends(get_order_repository),
):
    record = payload.model_dump(mode="json")
    record["companyId"] = record.get("companyId") or settings.DEFAULT_COMPANY_ID
    stored = await repository.create(record)
    logger.info(
        "Order created",
        extra={"order_id": stored.record["id"], "shopify_order_id": record["shopifyOrderId"], "degraded": stored.degraded},
    )
    mark_degraded(response, stored.degraded)
    return stored.record


@router.get("/{order_id}", response_model=Order)
async def get_order(
    order_id: str,
    response: Response,
    repository: TableRepository = Depends(get_order_repository),
):
    stored = await repository.get(order_id)
    mark_degraded(response, stored.degraded)
    return stored.record


@router.patch("/{order_id}", response_model=Order)
async def update_order(
    order_id: str,
    payload: OrderUpdate,
    response: Response,
    repository: TableRepository = Depends(get_order_repository),
):
    changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    stored = await repository.update(order_id, changes)
    mark_degraded(response, stored.degraded)
    return stored.record


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_order(
    order_id: str,
    repository: TableRepository = Depends(get_order_repository),
):
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    mark_degraded(response, await repository.delete(order_id))
    return response


@router.get("/{order_id}/shipment", response_model=ShipmentResponse)
async def get_order_shipment(
    order_id: str,
    response: Response,
    repository: TableRepository = Depends(get_order_repository),
):
    try:
        stored = await repository.get(order_id)
    except NotFound:
        return ShipmentResponse(shipment=missing_shipment())
    mark_degraded(response, stored.degraded)
    return ShipmentResponse(shipment=build_shipment(stored.record))
