from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import orjson
from sqlalchemy import delete
from sqlalchemy.orm import Session, sessionmaker

from influencer_admin.client.models import ProductCacheEntry
from influencer_admin.config import settings

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "shopify_products_cache_"


def cache_key(query: str | None) -> str:
    return f"{CACHE_KEY_PREFIX}{(query or '').strip() or 'all'}"


@dataclass(frozen=True)
class CachedSearch:
    products: list[dict[str, Any]]
    total_count: int
    timestamp: float


class ProductSearchCache:
    """Search results persisted per query string, fresh for ``ttl_seconds``.

    A stale entry reads as a miss and is removed on that read. Nothing
    invalidates an entry when the catalog itself changes.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._session_factory = session_factory
        self._ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.PRODUCT_CACHE_TTL_SECONDS
        self._clock = clock

    def get(self, query: str | None) -> CachedSearch | None:
        key = cache_key(query)
        with self._session_factory() as session:
            entry = session.get(ProductCacheEntry, key)
            if entry is None:
                return None
            if self._clock() - entry.timestamp > self._ttl_seconds:
                session.delete(entry)
                session.commit()
                logger.debug("Evicted stale product cache entry", extra={"key": key})
                return None
            return CachedSearch(
                products=orjson.loads(entry.payload),
                total_count=entry.total_count,
                timestamp=entry.timestamp,
            )

    def set(self, query: str | None, products: list[dict[str, Any]], total_count: int | None = None) -> None:
        key = cache_key(query)
        with self._session_factory() as session:
            self._upsert(
                session,
                key=key,
                payload=orjson.dumps(products).decode("utf-8"),
                total_count=total_count if total_count is not None else len(products),
            )
            session.commit()

    def clear(self) -> None:
        with self._session_factory() as session:
            session.execute(delete(ProductCacheEntry))
            session.commit()

    def _upsert(self, session: Session, *, key: str, payload: str, total_count: int) -> None:
        entry = session.get(ProductCacheEntry, key)
        if entry is None:
            entry = ProductCacheEntry(key=key)
            session.add(entry)
        entry.payload = payload
        entry.total_count = total_count
        entry.timestamp = self._clock()
