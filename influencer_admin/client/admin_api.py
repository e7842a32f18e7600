from __future__ import annotations

from typing import Any

import httpx

DEGRADED_HEADER = "X-Degraded"


class AdminApiError(RuntimeError):
    def __init__(self, *, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AdminApiClient:
    """Async client for the admin HTTP surface.

    ``degraded`` reflects the ``X-Degraded`` header of the most recent
    response, i.e. whether it was answered from the in-memory fallback.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._transport = transport
        self.degraded = False

    async def list_influencers(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/influencers")

    async def get_influencer(self, influencer_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/influencers/{influencer_id}")

    async def create_influencer(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/influencers", json=payload)

    async def update_influencer(self, influencer_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PATCH", f"/influencers/{influencer_id}", json=changes)

    async def delete_influencer(self, influencer_id: str) -> None:
        await self._request("DELETE", f"/influencers/{influencer_id}")

    async def list_orders(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/orders")

    async def create_order(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/orders", json=payload)

    async def update_order(self, order_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PATCH", f"/orders/{order_id}", json=changes)

    async def get_shipment(self, order_id: str) -> dict[str, Any]:
        body = await self._request("GET", f"/orders/{order_id}/shipment")
        return body["shipment"]

    async def list_content(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/content")

    async def create_content(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/content", json=payload)

    async def update_content(self, content_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PATCH", f"/content/{content_id}", json=changes)

    async def list_message_templates(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/message-templates")

    async def create_message_template(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/message-templates", json=payload)

    async def get_stats(self) -> dict[str, Any]:
        return await self._request("GET", "/stats")

    async def search_products(
        self,
        *,
        q: str | None = None,
        page_info: str | None = None,
        limit: int = 50,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"limit": limit}
        if q:
            params["q"] = q
        if page_info:
            params["page_info"] = page_info
        return await self._request("GET", "/shopify/products", params=params)

    async def count_products(self, *, q: str | None = None) -> int:
        body = await self._request("GET", "/shopify/products/count", params={"q": q} if q else None)
        return int(body.get("count") or 0)

    async def create_commerce_order(self, payload: dict[str, Any]) -> str | None:
        body = await self._request("POST", "/shopify/orders", json=payload)
        order_id = body.get("orderId")
        return str(order_id) if order_id else None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else None
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, json=json, params=params, headers=headers)
        except httpx.RequestError as exc:
            raise AdminApiError(message=f"Network error while calling admin API: {exc}", status_code=503) from exc

        self.degraded = response.headers.get(DEGRADED_HEADER, "").lower() == "true"
        if response.status_code >= 400:
            raise AdminApiError(message=self._error_message(response), status_code=response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise AdminApiError(message="Admin API returned invalid JSON", status_code=response.status_code) from exc

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"Admin API call failed ({response.status_code})"
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"Admin API call failed ({response.status_code})"
