from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any

from influencer_admin.client.admin_api import AdminApiClient, AdminApiError
from influencer_admin.client.product_cache import ProductSearchCache

logger = logging.getLogger(__name__)


class ProductBrowser:
    """Catalog search state for the product selection step.

    Only one request is in flight at a time: starting a search or a
    continuation cancels the previous request, and a cancelled or replaced
    call returns ``None`` without touching the displayed products. A fresh
    search also asks for the catalog-wide count, which is cached with the
    first page.
    """

    def __init__(self, api: AdminApiClient, cache: ProductSearchCache, *, page_size: int = 50) -> None:
        self.api = api
        self.cache = cache
        self.page_size = page_size
        self.query = ""
        self.products: list[dict[str, Any]] = []
        self.total_count = 0
        self.next_page_info: str | None = None
        self.prev_page_info: str | None = None
        self.from_cache = False
        self.loading = False
        self.error: str | None = None
        self._inflight: asyncio.Task | None = None

    async def search(self, query: str = "") -> list[dict[str, Any]] | None:
        self._cancel_inflight()
        trimmed = query.strip()
        self.query = trimmed
        self.error = None

        cached = self.cache.get(trimmed)
        if cached is not None:
            self.products = list(cached.products)
            self.total_count = cached.total_count
            self.next_page_info = None
            self.prev_page_info = None
            self.from_cache = True
            return self.products

        body = await self._run(self._first_page(trimmed))
        if body is None:
            return None
        products = list(body.get("products") or [])
        self.products = products
        self.total_count = body["totalCount"]
        self.next_page_info = body.get("nextPageInfo")
        self.prev_page_info = body.get("prevPageInfo")
        self.from_cache = False
        if products:
            self.cache.set(trimmed, products, self.total_count)
        return self.products

    async def load_more(self) -> list[dict[str, Any]] | None:
        if not self.next_page_info:
            return self.products
        self._cancel_inflight()
        self.error = None
        body = await self._run(self.api.search_products(page_info=self.next_page_info, limit=self.page_size))
        if body is None:
            return None

        seen = {str(product.get("id")) for product in self.products}
        for product in body.get("products") or []:
            key = str(product.get("id"))
            if key not in seen:
                seen.add(key)
                self.products.append(product)
        self.next_page_info = body.get("nextPageInfo")
        self.prev_page_info = body.get("prevPageInfo")
        return self.products

    def clear_cache(self) -> None:
        self.cache.clear()

    def _cancel_inflight(self) -> None:
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None
        self.loading = False

    async def _first_page(self, query: str) -> dict[str, Any]:
        """Fetch page one together with the catalog-wide count for ``query``."""
        body = await self.api.search_products(q=query or None, limit=self.page_size)
        try:
            total_count = await self.api.count_products(q=query or None)
        except AdminApiError as exc:
            total_count = len(body.get("products") or [])
            logger.warning(
                "Product count failed, using page length",
                extra={"query": query, "error": exc.message, "total_count": total_count},
            )
        return {**body, "totalCount": total_count}

    async def _run(self, call: Awaitable[dict[str, Any]]) -> dict[str, Any] | None:
        task = asyncio.ensure_future(call)
        self._inflight = task
        self.loading = True
        try:
            body = await task
        except asyncio.CancelledError:
            if self._inflight is task:
                self._inflight = None
                self.loading = False
                raise
            body = None
        except AdminApiError as exc:
            if self._inflight is task:
                self.error = exc.message or "Failed to load products"
            body = None

        # a finished request can still have been replaced before this coroutine resumed
        if self._inflight is not task:
            logger.debug("Product request superseded", extra={"query": self.query})
            return None
        self._inflight = None
        self.loading = False
        return body
