from __future__ import annotations

import copy
import uuid
from typing import Any

ENTITIES = ("influencers", "orders", "content", "message_templates")


class MemoryStore:
    """Process-lifetime records used while BRMH is unreachable.

    Nothing here is ever written back to BRMH; records created during an
    outage stay local until the process exits.
    """

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, dict[str, Any]]] = {name: {} for name in ENTITIES}

    def list(self, entity: str) -> list[dict[str, Any]]:
        return [copy.deepcopy(record) for record in self._tables[entity].values()]

    def get(self, entity: str, record_id: str) -> dict[str, Any] | None:
        record = self._tables[entity].get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def create(self, entity: str, record: dict[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(record)
        stored.setdefault("id", str(uuid.uuid4()))
        self._tables[entity][stored["id"]] = stored
        return copy.deepcopy(stored)

    def update(self, entity: str, record_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        record = self._tables[entity].get(record_id)
        if record is None:
            return None
        record.update(copy.deepcopy(changes))
        return copy.deepcopy(record)

    def delete(self, entity: str, record_id: str) -> bool:
        return self._tables[entity].pop(record_id, None) is not None

    def clear(self) -> None:
        for table in self._tables.values():
            table.clear()
