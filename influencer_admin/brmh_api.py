from __future__ import annotations

import logging
from typing import Any

import httpx

from influencer_admin.config import settings
from influencer_admin.errors import RemoteUnavailable

logger = logging.getLogger(__name__)


class BrmhApiError(RemoteUnavailable):
    def __init__(self, *, message: str, status_code: int = 500) -> None:
        super().__init__(message, status_code=status_code)


class BrmhTableClient:
    """Thin client for the BRMH generic CRUD table service.

    Every table is addressed by name and every item by its ``id`` key. The
    service answers ``{success, item|items|itemId}``.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.brmh_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.BRMH_REQUEST_TIMEOUT_SECONDS
        self._transport = transport

    async def list_items(self, table: str, *, items_per_page: int) -> list[dict[str, Any]]:
        body = await self._request(
            "GET",
            params={"tableName": table, "pagination": "true", "itemPerPage": str(items_per_page)},
        )
        if not body.get("success"):
            return []
        items = body.get("items")
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    async def get_item(self, table: str, item_id: str) -> dict[str, Any] | None:
        body = await self._request(
            "GET",
            params={"tableName": table, "id": item_id},
            allow_not_found=True,
        )
        if body is None or not body.get("success"):
            return None
        item = body.get("item")
        if not isinstance(item, dict) or not item:
            return None
        return item

    async def create_item(self, table: str, item: dict[str, Any]) -> str | None:
        body = await self._request("POST", params={"tableName": table}, json={"item": item})
        if body.get("success") is False:
            raise BrmhApiError(message=f"BRMH rejected create on {table}: {body.get('error') or body}")
        item_id = body.get("itemId")
        return str(item_id) if item_id is not None else item.get("id")

    async def update_item(self, table: str, item_id: str, updates: dict[str, Any]) -> None:
        body = await self._request(
            "PUT",
            params={"tableName": table},
            json={"key": {"id": item_id}, "updates": updates},
        )
        if body.get("success") is False:
            raise BrmhApiError(message=f"BRMH rejected update of {item_id} on {table}: {body.get('error') or body}")

    async def delete_item(self, table: str, item_id: str) -> None:
        body = await self._request("DELETE", params={"tableName": table}, json={"id": item_id})
        if body.get("success") is False:
            raise BrmhApiError(message=f"BRMH rejected delete of {item_id} on {table}: {body.get('error') or body}")

    async def test_connection(self) -> bool:
        try:
            async with self._client() as client:
                response = await client.get(f"{self._base_url}/test")
        except httpx.RequestError as exc:
            logger.warning("BRMH connection test failed", extra={"error": str(exc)})
            return False
        return response.status_code < 400

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def _request(
        self,
        method: str,
        *,
        params: dict[str, str],
        json: dict[str, Any] | None = None,
        allow_not_found: bool = False,
    ) -> dict[str, Any] | None:
        url = f"{self._base_url}/crud"
        try:
            async with self._client() as client:
                response = await client.request(method, url, params=params, json=json)
        except httpx.RequestError as exc:
            raise BrmhApiError(message=f"Network error while calling BRMH: {exc}") from exc

        if allow_not_found and response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise BrmhApiError(message=f"BRMH call failed ({response.status_code}): {response.text}")

        try:
            body = response.json()
        except ValueError as exc:
            raise BrmhApiError(message="BRMH returned invalid JSON") from exc

        if not isinstance(body, dict):
            raise BrmhApiError(message="BRMH response must be a JSON object")
        return body
