from __future__ import annotations

import asyncio
import logging
import random
import re
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from influencer_admin.config import settings
from influencer_admin.errors import RemoteUnavailable

logger = logging.getLogger(__name__)

_PAGE_INFO_RE = re.compile(r"page_info=([^&>]+)")
_RATE_LIMIT_DELAY_RANGE_SECONDS = (0.7, 1.2)


class ShopifyApiError(RemoteUnavailable):
    def __init__(self, *, message: str, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code)


def parse_link_header(link: str | None) -> tuple[str | None, str | None]:
    """Return the ``(next, previous)`` ``page_info`` cursors of a Link header."""
    next_page_info: str | None = None
    prev_page_info: str | None = None
    if not link:
        return None, None
    for part in link.split(","):
        match = _PAGE_INFO_RE.search(part)
        if not match:
            continue
        if 'rel="next"' in part:
            next_page_info = match.group(1)
        elif 'rel="previous"' in part:
            prev_page_info = match.group(1)
    return next_page_info, prev_page_info


class ShopifyApiClient:
    def __init__(
        self,
        *,
        store_domain: str | None = None,
        access_token: str | None = None,
        api_version: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._store_domain = store_domain or settings.SHOPIFY_STORE_DOMAIN
        self._access_token = access_token or settings.SHOPIFY_ADMIN_TOKEN
        self._api_version = api_version or settings.SHOPIFY_API_VERSION
        self._timeout = settings.SHOPIFY_REQUEST_TIMEOUT_SECONDS
        self._transport = transport
        self._sleep = sleep

    @property
    def configured(self) -> bool:
        return bool(self._store_domain and self._access_token)

    async def list_products(
        self,
        *,
        q: str | None = None,
        vendor: str | None = None,
        page_info: str | None = None,
        limit: int = 100,
    ) -> tuple[list[dict[str, Any]], str | None, str | None]:
        # Shopify rejects filters alongside a page_info cursor.
        if page_info:
            params = {"page_info": page_info, "limit": str(limit)}
        else:
            params = {"status": "active", "published_status": "published", "limit": str(limit)}
            if q:
                params["title"] = q
            if vendor:
                params["vendor"] = vendor

        response = await self._request("GET", "/products.json", params=params)
        body = self._json(response)
        products = body.get("products")
        next_page_info, prev_page_info = parse_link_header(response.headers.get("link"))
        return (
            [product for product in products or [] if isinstance(product, dict)],
            next_page_info,
            prev_page_info,
        )

    async def count_products(self, *, q: str | None = None, vendor: str | None = None) -> int:
        params = {"status": "active", "published_status": "published"}
        if q:
            params["title"] = q
        if vendor:
            params["vendor"] = vendor
        response = await self._request("GET", "/products/count.json", params=params)
        count = self._json(response).get("count")
        try:
            return int(count or 0)
        except (TypeError, ValueError) as exc:
            raise ShopifyApiError(message=f"Shopify returned an invalid product count: {count!r}") from exc

    async def create_order(
        self,
        *,
        line_items: list[dict[str, Any]],
        email: str | None = None,
        shipping_address: dict[str, Any] | None = None,
        tags: list[str] | None = None,
        note: str | None = None,
        financial_status: str = "pending",
        fulfillment_status: str | None = None,
    ) -> str:
        order: dict[str, Any] = {
            "line_items": line_items,
            "financial_status": financial_status,
            "send_receipt": False,
            "send_fulfillment_receipt": False,
        }
        if email:
            order["email"] = email
        if shipping_address:
            order["shipping_address"] = shipping_address
        if tags:
            order["tags"] = ", ".join(tags)
        if note:
            order["note"] = note
        if fulfillment_status:
            order["fulfillment_status"] = fulfillment_status

        response = await self._request("POST", "/orders.json", json={"order": order})
        created = self._json(response).get("order") or {}
        order_id = created.get("id")
        if order_id is None or order_id == "":
            raise ShopifyApiError(message="Shopify order creation returned no id")
        return str(order_id)

    def _base_url(self) -> str:
        if not self.configured:
            raise ShopifyApiError(message="Shopify environment variables are not configured", status_code=500)
        return f"https://{self._store_domain}/admin/api/{self._api_version}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url = f"{self._base_url()}{path}"
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self._access_token or "",
        }
        attempts = 0
        while True:
            attempts += 1
            try:
                async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                    response = await client.request(method, url, params=params, json=json, headers=headers)
            except httpx.RequestError as exc:
                raise ShopifyApiError(message=f"Network error while calling Shopify: {exc}") from exc

            if response.status_code == 429 and attempts == 1:
                delay = random.uniform(*_RATE_LIMIT_DELAY_RANGE_SECONDS)
                logger.warning("Shopify rate limited, retrying once", extra={"path": path, "delay": delay})
                await self._sleep(delay)
                continue
            break

        if response.status_code >= 400:
            raise ShopifyApiError(
                message=f"Shopify API call failed ({response.status_code}): {response.text}",
                status_code=502,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise ShopifyApiError(message="Shopify API returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise ShopifyApiError(message="Shopify API response must be a JSON object")
        return body
