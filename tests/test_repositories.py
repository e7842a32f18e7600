from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from influencer_admin.errors import NotFound
from influencer_admin.repositories import TableRepository
from influencer_admin.tables import InfluencerCodec

FROZEN = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _repository(fake_brmh, memory_store, clock=lambda: FROZEN) -> TableRepository:
    return TableRepository(
        client=fake_brmh,
        memory=memory_store,
        table="brmh-influencers",
        entity="influencers",
        label="Influencer",
        page_size=50,
        codec=InfluencerCodec(),
        clock=clock,
    )


def _payload() -> dict:
    return {
        "name": "Jane Doe",
        "email": "jane@x.com",
        "phone": "+91 90000 00000",
        "address": "12 Lake Road",
        "socialMedia": {"instagram": {"handle": "@jane", "followers": 1200}},
        "categories": ["fashion"],
        "status": "PendingApproval",
    }


def test_create_then_get_round_trips_supplied_fields(fake_brmh, memory_store):
    repository = _repository(fake_brmh, memory_store)

    async def scenario():
        created = await repository.create(_payload())
        return created, await repository.get(created.record["id"])

    created, fetched = asyncio.run(scenario())

    assert not created.degraded
    assert not fetched.degraded
    for key, value in _payload().items():
        assert fetched.record[key] == value
    assert fetched.record["createdAt"] == fetched.record["updatedAt"] == FROZEN.isoformat()


def test_update_bumps_updated_at_even_when_clock_has_not_moved(fake_brmh, memory_store):
    repository = _repository(fake_brmh, memory_store)

    async def scenario():
        created = await repository.create(_payload())
        updated = await repository.update(created.record["id"], {"status": "Approved", "updatedAt": "1999-01-01"})
        return created, updated, await repository.get(created.record["id"])

    created, updated, fetched = asyncio.run(scenario())

    assert fetched.record["status"] == "Approved"
    for key in ("name", "email", "phone", "address", "socialMedia", "categories", "createdAt"):
        assert fetched.record[key] == created.record[key]
    assert datetime.fromisoformat(fetched.record["updatedAt"]) > datetime.fromisoformat(created.record["updatedAt"])
    assert updated.record == fetched.record


def test_list_falls_back_to_memory_when_remote_unavailable(fake_brmh, memory_store):
    memory_store.create("influencers", {"id": "local-1", "name": "Offline", "email": "o@x.com"})
    fake_brmh.unavailable = True

    listing = asyncio.run(_repository(fake_brmh, memory_store).list())

    assert listing.degraded
    assert [item["id"] for item in listing.items] == ["local-1"]


def test_create_during_outage_lands_in_memory_only(fake_brmh, memory_store):
    fake_brmh.unavailable = True

    stored = asyncio.run(_repository(fake_brmh, memory_store).create(_payload()))

    assert stored.degraded
    assert memory_store.get("influencers", stored.record["id"])["name"] == "Jane Doe"
    assert fake_brmh.tables == {}


def test_get_raises_not_found_when_neither_store_has_id(fake_brmh, memory_store):
    with pytest.raises(NotFound, match="Influencer not found"):
        asyncio.run(_repository(fake_brmh, memory_store).get("nope"))


def test_get_consults_memory_when_remote_is_missing_the_record(fake_brmh, memory_store):
    memory_store.create("influencers", {"id": "local-1", "name": "Offline", "email": "o@x.com"})

    stored = asyncio.run(_repository(fake_brmh, memory_store).get("local-1"))

    assert stored.degraded
    assert stored.record["name"] == "Offline"


def test_update_in_memory_during_outage(fake_brmh, memory_store):
    memory_store.create(
        "influencers",
        {"id": "local-1", "name": "Offline", "status": "PendingApproval", "updatedAt": FROZEN.isoformat()},
    )
    fake_brmh.unavailable = True

    stored = asyncio.run(_repository(fake_brmh, memory_store).update("local-1", {"status": "Approved"}))

    assert stored.degraded
    assert stored.record["status"] == "Approved"
    assert stored.record["name"] == "Offline"
    assert datetime.fromisoformat(stored.record["updatedAt"]) > FROZEN


def test_delete_removes_remote_record(fake_brmh, memory_store):
    fake_brmh.seed("brmh-influencers", {"id": "inf-1", "name": "Jane"})

    degraded = asyncio.run(_repository(fake_brmh, memory_store).delete("inf-1"))

    assert degraded is False
    assert "inf-1" not in fake_brmh.tables["brmh-influencers"]


def test_delete_unknown_id_raises_not_found(fake_brmh, memory_store):
    with pytest.raises(NotFound):
        asyncio.run(_repository(fake_brmh, memory_store).delete("nope"))


def test_delete_falls_back_to_memory(fake_brmh, memory_store):
    memory_store.create("influencers", {"id": "local-1", "name": "Offline"})
    fake_brmh.unavailable = True

    degraded = asyncio.run(_repository(fake_brmh, memory_store).delete("local-1"))

    assert degraded is True
    assert memory_store.get("influencers", "local-1") is None


def test_find_by_scans_listing(fake_brmh, memory_store):
    fake_brmh.seed(
        "brmh-influencers",
        {"id": "a", "name": "A", "email": "same@x.com"},
        {"id": "b", "name": "B", "email": "other@x.com"},
    )

    listing = asyncio.run(_repository(fake_brmh, memory_store).find_by("email", "same@x.com"))

    assert [item["id"] for item in listing.items] == ["a"]
