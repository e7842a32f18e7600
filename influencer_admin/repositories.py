from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

from influencer_admin.brmh_api import BrmhTableClient
from influencer_admin.errors import NotFound, RemoteUnavailable
from influencer_admin.memory_store import MemoryStore
from influencer_admin.result import Result
from influencer_admin.tables import TableCodec

logger = logging.getLogger(__name__)

T = TypeVar("T")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Listing:
    items: list[dict[str, Any]]
    degraded: bool = False


@dataclass(frozen=True)
class Stored:
    record: dict[str, Any]
    degraded: bool = False


class TableRepository:
    """Remote-first access to one BRMH table.

    Whenever BRMH raises ``RemoteUnavailable`` the in-memory store answers
    instead and the outcome is marked ``degraded``. Records served from or
    written to memory are never reconciled with BRMH.
    """

    def __init__(
        self,
        *,
        client: BrmhTableClient,
        memory: MemoryStore,
        table: str,
        entity: str,
        label: str,
        page_size: int,
        codec: TableCodec | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._client = client
        self._memory = memory
        self.table = table
        self.entity = entity
        self.label = label
        self._page_size = page_size
        self._codec = codec or TableCodec()
        self._clock = clock

    async def list(self) -> Listing:
        fetched = await self._attempt("list", self._client.list_items(self.table, items_per_page=self._page_size))
        if fetched.ok:
            return Listing(items=[self._codec.from_item(item) for item in fetched.value or []])
        return Listing(items=self._memory.list(self.entity), degraded=True)

    async def get(self, record_id: str) -> Stored:
        fetched = await self._attempt("get", self._client.get_item(self.table, record_id))
        if fetched.ok and fetched.value is not None:
            return Stored(record=self._codec.from_item(fetched.value))
        record = self._memory.get(self.entity, record_id)
        if record is None:
            raise NotFound(f"{self.label} not found")
        return Stored(record=record, degraded=True)

    async def create(self, payload: dict[str, Any]) -> Stored:
        now = self._clock().isoformat()
        record = {**payload, "id": str(uuid.uuid4()), "createdAt": now, "updatedAt": now}
        written = await self._attempt("create", self._client.create_item(self.table, self._codec.to_item(record)))
        if written.ok:
            return Stored(record=record)
        return Stored(record=self._memory.create(self.entity, record), degraded=True)

    async def update(self, record_id: str, partial: dict[str, Any]) -> Stored:
        """Apply only the supplied fields and stamp a fresh ``updatedAt``."""
        changes = {key: value for key, value in partial.items() if key not in ("id", "createdAt", "updatedAt")}

        fetched = await self._attempt("get", self._client.get_item(self.table, record_id))
        if fetched.ok and fetched.value is not None:
            current = self._codec.from_item(fetched.value)
            changes["updatedAt"] = self._next_timestamp(current.get("updatedAt"))
            updates = self._codec.to_updates(changes, fetched.value)
            written = await self._attempt("update", self._client.update_item(self.table, record_id, updates))
            if written.ok:
                return Stored(record={**current, **changes})
            if self._memory.get(self.entity, record_id) is None:
                written.unwrap()

        current = self._memory.get(self.entity, record_id)
        if current is None:
            raise NotFound(f"{self.label} not found")
        changes["updatedAt"] = self._next_timestamp(current.get("updatedAt"))
        record = self._memory.update(self.entity, record_id, changes)
        return Stored(record=record or {**current, **changes}, degraded=True)

    async def delete(self, record_id: str) -> bool:
        """Delete from whichever store holds the id; returns the degraded flag."""
        fetched = await self._attempt("get", self._client.get_item(self.table, record_id))
        removed: Result[None] | None = None
        if fetched.ok and fetched.value is not None:
            removed = await self._attempt("delete", self._client.delete_item(self.table, record_id))

        memory_deleted = self._memory.delete(self.entity, record_id)
        if removed is not None and removed.ok:
            return False
        if not memory_deleted:
            if removed is not None:
                removed.unwrap()
            raise NotFound(f"{self.label} not found")
        return True

    async def find_by(self, field: str, value: Any) -> Listing:
        listing = await self.list()
        target = str(value)
        matches = [record for record in listing.items if record.get(field) is not None and str(record[field]) == target]
        return Listing(items=matches, degraded=listing.degraded)

    def _next_timestamp(self, previous: Any) -> str:
        now = self._clock()
        last = _parse_timestamp(previous)
        if last is not None and now <= last:
            now = last + timedelta(microseconds=1)
        return now.isoformat()

    async def _attempt(self, operation: str, call: Awaitable[T]) -> Result[T]:
        try:
            return Result.success(await call)
        except RemoteUnavailable as exc:
            logger.warning(
                "BRMH unavailable, falling back to in-memory store",
                extra={"table": self.table, "operation": operation, "error": exc.message},
            )
            return Result.failure(exc)
