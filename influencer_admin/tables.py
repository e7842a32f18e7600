"""Translation between BRMH table items and domain records.

The influencer table predates this service and reuses generic columns:

* ``role`` holds the influencer status,
* ``companyId`` holds ``socialMedia`` as a JSON string,
* ``teamId`` holds ``categories`` as a JSON string,
* ``address``, ``age`` and ``gender`` live in the ``data`` bucket.

Orders keep their scalar fields top-level and nest ``products``,
``shippingDetails`` and ``trackingInfo`` in ``data``. Content and message
templates are stored flat.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def _load_json(raw: Any, *, empty: Any, column: str) -> Any:
    if raw is None:
        return empty
    if not isinstance(raw, str):
        return raw if isinstance(raw, type(empty)) else empty
    if not raw.strip():
        return empty
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Unparseable JSON in table column", extra={"column": column})
        return empty
    return value if isinstance(value, type(empty)) else empty


def _load_bucket(raw: Any) -> dict[str, Any]:
    return dict(_load_json(raw, empty={}, column="data"))


class TableCodec:
    """Stores domain records as-is."""

    def to_item(self, record: dict[str, Any]) -> dict[str, Any]:
        return dict(record)

    def from_item(self, item: dict[str, Any]) -> dict[str, Any]:
        return dict(item)

    def to_updates(self, partial: dict[str, Any], current_item: dict[str, Any] | None) -> dict[str, Any]:
        return dict(partial)


class BucketCodec(TableCodec):
    """Codec for tables that keep some domain fields inside the ``data`` bucket."""

    data_fields: tuple[str, ...] = ()

    def _bucket_updates(self, partial: dict[str, Any], current_item: dict[str, Any] | None) -> dict[str, Any] | None:
        supplied = {key: partial[key] for key in self.data_fields if key in partial}
        if not supplied:
            return None
        bucket = _load_bucket(current_item.get("data")) if current_item else {}
        bucket.update(supplied)
        return bucket


class InfluencerCodec(BucketCodec):
    data_fields = ("address", "age", "gender")

    def to_item(self, record: dict[str, Any]) -> dict[str, Any]:
        categories = record.get("categories")
        social_media = record.get("socialMedia")
        return {
            "id": record["id"],
            "name": record.get("name"),
            "email": record.get("email"),
            "phone": record.get("phone") or "",
            "data": {key: record[key] for key in self.data_fields if record.get(key) is not None},
            "role": record.get("status"),
            "teamId": json.dumps(categories) if categories else "",
            "companyId": json.dumps(social_media) if social_media else "",
            "createdAt": record.get("createdAt"),
            "updatedAt": record.get("updatedAt"),
        }

    def from_item(self, item: dict[str, Any]) -> dict[str, Any]:
        bucket = _load_bucket(item.get("data"))
        address = item.get("address")
        if not (isinstance(address, str) and address.strip()):
            address = bucket.get("address")
        return {
            "id": item.get("id"),
            "name": item.get("name"),
            "email": item.get("email") or "",
            "phone": item.get("phone") or None,
            "age": bucket.get("age"),
            "gender": bucket.get("gender"),
            "address": address,
            "socialMedia": _load_json(item.get("companyId"), empty={}, column="companyId"),
            "categories": _load_json(item.get("teamId"), empty=[], column="teamId"),
            "status": item.get("role") or "PendingApproval",
            "createdAt": item.get("createdAt"),
            "updatedAt": item.get("updatedAt"),
        }

    def to_updates(self, partial: dict[str, Any], current_item: dict[str, Any] | None) -> dict[str, Any]:
        updates: dict[str, Any] = {}
        for key in ("name", "email", "updatedAt"):
            if key in partial:
                updates[key] = partial[key]
        if "phone" in partial:
            updates["phone"] = partial["phone"] or ""
        if "status" in partial:
            updates["role"] = partial["status"]
        if "categories" in partial:
            updates["teamId"] = json.dumps(partial["categories"]) if partial["categories"] else ""
        if "socialMedia" in partial:
            updates["companyId"] = json.dumps(partial["socialMedia"]) if partial["socialMedia"] else ""

        bucket = self._bucket_updates(partial, current_item)
        if bucket is not None:
            updates["data"] = bucket
        # a legacy top-level address would shadow the bucket on the next read
        legacy_address = current_item.get("address") if current_item else None
        if "address" in partial and isinstance(legacy_address, str) and legacy_address.strip():
            updates["address"] = partial["address"]
        return updates


class OrderCodec(BucketCodec):
    top_level_fields = (
        "id",
        "influencerId",
        "companyId",
        "shopifyOrderId",
        "status",
        "totalAmount",
        "createdAt",
        "updatedAt",
    )
    data_fields = ("products", "shippingDetails", "trackingInfo")

    def to_item(self, record: dict[str, Any]) -> dict[str, Any]:
        item = {key: record.get(key) for key in self.top_level_fields}
        item["data"] = {
            "products": record.get("products") or [],
            **{
                key: record[key]
                for key in ("shippingDetails", "trackingInfo")
                if record.get(key) is not None
            },
        }
        return item

    def from_item(self, item: dict[str, Any]) -> dict[str, Any]:
        bucket = _load_bucket(item.get("data"))
        record = {key: item.get(key) for key in self.top_level_fields}
        for key in ("influencerId", "shopifyOrderId"):
            record[key] = str(record[key]) if record[key] is not None else ""
        record["status"] = record["status"] or "Created"
        products = bucket.get("products")
        record["products"] = products if isinstance(products, list) else []
        record["shippingDetails"] = bucket.get("shippingDetails")
        record["trackingInfo"] = bucket.get("trackingInfo")
        return record

    def to_updates(self, partial: dict[str, Any], current_item: dict[str, Any] | None) -> dict[str, Any]:
        updates = {key: partial[key] for key in self.top_level_fields if key in partial and key != "id"}
        bucket = self._bucket_updates(partial, current_item)
        if bucket is not None:
            updates["data"] = bucket
        return updates
