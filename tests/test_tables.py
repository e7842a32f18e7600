from __future__ import annotations

import json

from influencer_admin.tables import InfluencerCodec, OrderCodec


def test_influencer_uses_legacy_columns():
    item = InfluencerCodec().to_item(
        {
            "id": "inf-1",
            "name": "Jane Doe",
            "email": "jane@x.com",
            "phone": None,
            "age": 27,
            "address": "12 Lake Road",
            "socialMedia": {"instagram": {"handle": "@jane", "followers": 1200}},
            "categories": ["beauty"],
            "status": "Approved",
            "createdAt": "2024-01-01T00:00:00+00:00",
            "updatedAt": "2024-01-01T00:00:00+00:00",
        }
    )

    assert item["role"] == "Approved"
    assert json.loads(item["companyId"]) == {"instagram": {"handle": "@jane", "followers": 1200}}
    assert json.loads(item["teamId"]) == ["beauty"]
    assert item["data"] == {"address": "12 Lake Road", "age": 27}
    assert item["phone"] == ""


def test_influencer_address_prefers_top_level_string():
    codec = InfluencerCodec()

    legacy = codec.from_item({"id": "a", "name": "A", "address": "Top Street", "data": {"address": "Bucket Street"}})
    bucketed = codec.from_item({"id": "b", "name": "B", "address": "  ", "data": '{"address": "Bucket Street"}'})

    assert legacy["address"] == "Top Street"
    assert bucketed["address"] == "Bucket Street"


def test_influencer_unparseable_json_decodes_to_empty_values():
    record = InfluencerCodec().from_item(
        {"id": "a", "name": "A", "companyId": "{not json", "teamId": "", "data": "also not json"}
    )

    assert record["socialMedia"] == {}
    assert record["categories"] == []
    assert record["address"] is None
    assert record["status"] == "PendingApproval"


def test_influencer_partial_update_only_touches_supplied_fields():
    current = {"id": "a", "name": "A", "role": "PendingApproval", "data": {"address": "Old Road", "age": 30}}

    updates = InfluencerCodec().to_updates({"status": "Approved", "gender": "female"}, current)

    assert updates == {"role": "Approved", "data": {"address": "Old Road", "age": 30, "gender": "female"}}


def test_influencer_address_update_overwrites_legacy_column():
    current = {"id": "a", "address": "Legacy Road", "data": {}}

    updates = InfluencerCodec().to_updates({"address": "New Road"}, current)

    assert updates["address"] == "New Road"
    assert updates["data"] == {"address": "New Road"}


def test_order_nests_products_and_tracking_in_data():
    codec = OrderCodec()
    record = {
        "id": "o-1",
        "influencerId": "inf-1",
        "companyId": "company-1",
        "shopifyOrderId": "9001",
        "status": "Created",
        "totalAmount": 0,
        "products": [{"id": "501", "name": "T-Shirt", "price": 20.0, "quantity": 2}],
        "shippingDetails": {"city": "Pune"},
        "trackingInfo": None,
        "createdAt": "2024-01-01T00:00:00+00:00",
        "updatedAt": "2024-01-01T00:00:00+00:00",
    }

    item = codec.to_item(record)

    assert item["data"] == {"products": record["products"], "shippingDetails": {"city": "Pune"}}
    assert "products" not in item
    assert codec.from_item(item) == record


def test_order_tracking_update_keeps_products():
    current = {"id": "o-1", "status": "Created", "data": {"products": [{"id": "501"}], "shippingDetails": {"city": "Pune"}}}

    updates = OrderCodec().to_updates({"status": "InTransit", "trackingInfo": {"carrier": "Delhivery"}}, current)

    assert updates["status"] == "InTransit"
    assert updates["data"] == {
        "products": [{"id": "501"}],
        "shippingDetails": {"city": "Pune"},
        "trackingInfo": {"carrier": "Delhivery"},
    }
