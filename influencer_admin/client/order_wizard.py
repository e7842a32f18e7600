"""Four-step order placement flow for gifting products to an influencer.

Steps run strictly in order (back navigation is always allowed):

1. pick an influencer,
2. pick product variants and quantities,
3. fill in the shipping form,
4. review totals and submit.

Submission is best-effort and not atomic. The commerce order is attempted
first and a failure there is logged and replaced by a generated ``SHO-<ms>``
id. The local order record is then created, and a failure at that point is
surfaced on ``error`` with the wizard left open on the review step. Only
after the local record exists is the influencer flagged ``OrderCreated``,
again best-effort.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, fields
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any, TypeVar

from influencer_admin.client.admin_api import AdminApiClient, AdminApiError
from influencer_admin.client.app_state import AppStore
from influencer_admin.config import settings
from influencer_admin.enums import InfluencerStatusEnum, OrderStatusEnum
from influencer_admin.errors import RemoteUnavailable
from influencer_admin.result import Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

ESTIMATED_DELIVERY_DAYS = 14
ORDER_TAGS = ["influencer-order"]


class WizardStep(IntEnum):
    SelectInfluencer = 1
    SelectProducts = 2
    ShippingDetails = 3
    ReviewAndSubmit = 4


@dataclass
class SelectedItem:
    product_id: int | str
    variant_id: int | str
    title: str
    price: float
    qty: int = 1


@dataclass
class ShippingForm:
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    phone: str = ""
    email: str = ""

    REQUIRED = ("first_name", "last_name", "address", "city", "state", "zip_code")

    def is_complete(self) -> bool:
        return all(getattr(self, name).strip() for name in self.REQUIRED)

    def update(self, **values: str) -> None:
        known = {item.name for item in fields(self)}
        for name, value in values.items():
            if name not in known:
                raise AttributeError(f"Unknown shipping field: {name}")
            setattr(self, name, value or "")


def split_name(full_name: str | None) -> tuple[str, str]:
    parts = (full_name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def _same_id(left: Any, right: Any) -> bool:
    return str(left) == str(right)


async def _best_effort(call: Awaitable[T]) -> Result[T]:
    try:
        return Result.success(await call)
    except AdminApiError as exc:
        return Result.failure(RemoteUnavailable(exc.message, status_code=exc.status_code))


class OrderWizard:
    def __init__(
        self,
        store: AppStore,
        api: AdminApiClient,
        *,
        preselected_influencer_id: str | None = None,
        clock: Callable[[], float] = time.time,
        country: str | None = None,
    ) -> None:
        self.store = store
        self.api = api
        self._clock = clock
        self.country = country or settings.DEFAULT_SHIPPING_COUNTRY
        self._preselected_influencer_id = preselected_influencer_id
        self.closed = False
        self.last_order: dict[str, Any] | None = None
        self.reset()

    def reset(self) -> None:
        self.step = WizardStep.SelectInfluencer
        self.selected_influencer_id: str | None = None
        self.selected_items: list[SelectedItem] = []
        self.shipping = ShippingForm()
        self.zero_value_order = True
        self.is_submitting = False
        self.error: str | None = None
        if self._preselected_influencer_id:
            self.select_influencer(self._preselected_influencer_id)

    # -- navigation -------------------------------------------------------

    def can_advance(self) -> bool:
        if self.step is WizardStep.SelectInfluencer:
            return bool(self.selected_influencer_id)
        if self.step is WizardStep.SelectProducts:
            return bool(self.selected_items)
        if self.step is WizardStep.ShippingDetails:
            return self.shipping.is_complete()
        return False

    def next_step(self) -> bool:
        if not self.can_advance():
            return False
        self.step = WizardStep(self.step + 1)
        return True

    def back(self) -> None:
        if self.step > WizardStep.SelectInfluencer:
            self.step = WizardStep(self.step - 1)

    # -- step 1 -----------------------------------------------------------

    def select_influencer(self, influencer_id: str) -> None:
        self.selected_influencer_id = influencer_id
        self.shipping.update(address="", city="", state="", zip_code="", email="")
        influencer = self.store.find_influencer(influencer_id)
        if influencer is None:
            return
        address = influencer.get("address")
        if isinstance(address, dict):
            self.shipping.update(
                address=str(address.get("street") or address.get("address") or address.get("line1") or ""),
                city=str(address.get("city") or ""),
                state=str(address.get("state") or address.get("province") or ""),
                zip_code=str(address.get("zipCode") or address.get("zip") or address.get("postalCode") or ""),
            )
        elif isinstance(address, str) and address.strip():
            self.shipping.address = address
        if influencer.get("email"):
            self.shipping.email = influencer["email"]

    # -- step 2 -----------------------------------------------------------

    def add_variant(self, product_id: int | str, variant: dict[str, Any]) -> None:
        variant_id = variant["variantId"]
        for item in self.selected_items:
            if _same_id(item.variant_id, variant_id):
                item.qty += 1
                return
        self.selected_items.append(
            SelectedItem(
                product_id=product_id,
                variant_id=variant_id,
                title=variant.get("title") or "Variant",
                price=float(variant.get("price") or 0),
            )
        )

    def update_selected_qty(self, variant_id: int | str, qty: int) -> None:
        if qty <= 0:
            self.selected_items = [item for item in self.selected_items if not _same_id(item.variant_id, variant_id)]
            return
        for item in self.selected_items:
            if _same_id(item.variant_id, variant_id):
                item.qty = qty

    def decrement_variant(self, variant_id: int | str) -> None:
        self.update_selected_qty(variant_id, self.get_variant_qty(variant_id) - 1)

    def get_variant_qty(self, variant_id: int | str) -> int:
        for item in self.selected_items:
            if _same_id(item.variant_id, variant_id):
                return item.qty
        return 0

    def get_selected_total(self) -> float:
        return sum(item.price * item.qty for item in self.selected_items)

    def get_selected_count(self) -> int:
        return sum(item.qty for item in self.selected_items)

    # -- step 4 -----------------------------------------------------------

    def get_real_subtotal(self) -> float:
        return self.get_selected_total()

    def get_real_shipping(self) -> float:
        return 0.0

    def get_real_tax(self) -> float:
        return 0.0

    def get_real_discount(self) -> float:
        if not self.zero_value_order:
            return 0.0
        return self.get_real_subtotal() + self.get_real_shipping() + self.get_real_tax()

    def get_real_total(self) -> float:
        if self.zero_value_order:
            return 0.0
        return self.get_real_subtotal() + self.get_real_shipping() + self.get_real_tax()

    def _line_items(self) -> list[dict[str, Any]]:
        return [
            {
                "variant_id": item.variant_id,
                "quantity": item.qty,
                "price": "0.00" if self.zero_value_order else f"{item.price:.2f}",
            }
            for item in self.selected_items
        ]

    def _commerce_payload(self, influencer: dict[str, Any], first_name: str, last_name: str) -> dict[str, Any]:
        tags = [*ORDER_TAGS, "zero-value"] if self.zero_value_order else list(ORDER_TAGS)
        return {
            "email": self.shipping.email or influencer.get("email") or None,
            "shippingAddress": {
                "first_name": self.shipping.first_name or first_name,
                "last_name": self.shipping.last_name or last_name,
                "address1": self.shipping.address,
                "city": self.shipping.city,
                "province": self.shipping.state,
                "country": self.country,
                "zip": self.shipping.zip_code,
                "phone": self.shipping.phone or None,
            },
            "lineItems": self._line_items(),
            "tags": tags,
            "note": f"Influencer order for {influencer.get('name') or influencer.get('id')}",
            "financialStatus": "pending",
        }

    def _order_payload(
        self,
        influencer: dict[str, Any],
        shopify_order_id: str,
        first_name: str,
        last_name: str,
    ) -> dict[str, Any]:
        now = datetime.fromtimestamp(self._clock(), tz=timezone.utc)
        return {
            "influencerId": self.selected_influencer_id,
            "companyId": settings.DEFAULT_COMPANY_ID,
            "shopifyOrderId": shopify_order_id,
            "status": OrderStatusEnum.Created.value,
            "trackingInfo": {
                "status": "Processing",
                "trackingNumber": "",
                "estimatedDelivery": (now + timedelta(days=ESTIMATED_DELIVERY_DAYS)).isoformat(),
            },
            "products": [
                {"id": str(item.variant_id), "name": item.title, "price": item.price, "quantity": item.qty}
                for item in self.selected_items
            ],
            "shippingDetails": {
                "firstName": self.shipping.first_name or first_name,
                "lastName": self.shipping.last_name or last_name,
                "address": self.shipping.address,
                "city": self.shipping.city,
                "state": self.shipping.state,
                "zipCode": self.shipping.zip_code,
                "phone": self.shipping.phone,
                "email": self.shipping.email or influencer.get("email") or "",
            },
            "totalAmount": round(self.get_real_total(), 2),
        }

    async def place_order(self) -> dict[str, Any] | None:
        """Submit the order; returns the local order record, or ``None`` on failure."""
        if not self.selected_influencer_id or not self.selected_items:
            self.error = "Select an influencer and at least one product"
            return None
        if self.step is not WizardStep.ReviewAndSubmit or not self.shipping.is_complete():
            self.error = "Complete the shipping details and review the order before submitting"
            return None

        self.is_submitting = True
        self.error = None
        try:
            influencer = self.store.find_influencer(self.selected_influencer_id)
            if influencer is None:
                self.error = f"Influencer with ID {self.selected_influencer_id} not found"
                return None
            first_name, last_name = split_name(influencer.get("name"))

            shopify_order_id = f"SHO-{int(self._clock() * 1000)}"
            commerce = await _best_effort(
                self.api.create_commerce_order(self._commerce_payload(influencer, first_name, last_name))
            )
            if commerce.ok and commerce.value:
                shopify_order_id = commerce.value
            elif not commerce.ok:
                logger.warning(
                    "Commerce order creation failed, continuing with local order",
                    extra={"error": commerce.error.message, "fallback_order_id": shopify_order_id},
                )

            try:
                order = await self.store.add_order(
                    self._order_payload(influencer, shopify_order_id, first_name, last_name)
                )
            except AdminApiError as exc:
                self.error = exc.message or "Couldn't place order. Please try again."
                return None

            flagged = await _best_effort(
                self.store.update_influencer(
                    self.selected_influencer_id,
                    {"status": InfluencerStatusEnum.OrderCreated.value},
                )
            )
            if not flagged.ok:
                logger.warning(
                    "Failed to flag influencer after order creation",
                    extra={"influencer_id": self.selected_influencer_id, "error": flagged.error.message},
                )

            self.last_order = order
            self._preselected_influencer_id = None
            self.reset()
            self.closed = True
            return order
        finally:
            self.is_submitting = False
