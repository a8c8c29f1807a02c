from __future__ import annotations

import asyncio
import threading

import pytest

from errors import StorageUnavailable
from persistence.booking_state import DocumentBookingStateRepository, seed_document
from persistence.memory_store import InMemoryDocumentStore
from persistence.repositories import AsyncDiskBookingRepository


def _booking_fields(**overrides):
    fields = {
        "apartmentId": 1,
        "fullName": "Sara",
        "phone": "0500000000",
        "checkIn": "2024-06-01T00:00:00+00:00",
        "checkOut": "2024-06-04T00:00:00+00:00",
        "totalPrice": 1440,
    }
    fields.update(overrides)
    return fields


def test_async_disk_repository_basic_flow(sandbox_project):
    async def _run():
        repo = AsyncDiskBookingRepository()
        assert repo.path == sandbox_project / "data" / "db.json"
        assert await repo.initialize() is True
        assert await repo.initialize() is False

        apartments = await repo.list_apartments()
        assert [a.id for a in apartments] == [1, 2, 3]
        assert apartments[0].pricePerNight == 480

        assert (await repo.get_apartment(2)).name == "شقة عائلية - المدينة"
        assert await repo.get_apartment(999) is None

        created = await repo.add_apartment({"name": "Loft", "location": "Abha", "pricePerNight": "250"})
        assert created.id == 4
        assert created.pricePerNight == 250
        assert created.bedrooms == 1
        assert created.amenities == []
        assert (await repo.list_apartments())[-1] == created

        b1 = await repo.create_booking(_booking_fields())
        b2 = await repo.create_booking(_booking_fields(apartmentId=2, email="o@example.com"))
        assert (b1.id, b2.id) == (1, 2)
        assert b1.email == ""
        assert b1.createdAt

        assert [b.id for b in await repo.list_bookings_for_apartment(1)] == [1]
        assert await repo.list_bookings_for_apartment(3) == []
        assert (await repo.get_booking(2)).email == "o@example.com"
        assert await repo.get_booking(3) is None

    asyncio.run(_run())


def test_ids_continue_from_the_largest_existing_id(memory_repo):
    first = memory_repo.create_booking(_booking_fields())
    assert first.id == 1
    second = memory_repo.create_booking(_booking_fields(checkIn="2024-07-01", checkOut="2024-07-02"))
    assert second.id == first.id + 1

    before = max(a.id for a in memory_repo.list_apartments())
    added = memory_repo.add_apartment({"name": "A", "location": "B", "pricePerNight": 1})
    assert added.id == before + 1


def test_create_booking_does_not_check_overlap(memory_repo):
    memory_repo.create_booking(_booking_fields())
    again = memory_repo.create_booking(_booking_fields())
    assert again.id == 2
    assert len(memory_repo.list_bookings_for_apartment(1)) == 2


def test_add_apartment_coercion(memory_repo):
    apt = memory_repo.add_apartment(
        {
            "name": "Chalet",
            "location": "Taif",
            "bedrooms": "0",
            "pricePerNight": "199.5",
            "amenities": ["pool", "bbq"],
            "images": "not-a-list",
        }
    )
    assert apt.bedrooms == 1
    assert apt.pricePerNight == 199.5
    assert apt.amenities == ["pool", "bbq"]
    assert apt.images == []
    assert apt.description == ""

    junk = memory_repo.add_apartment({"name": "X", "location": "Y", "pricePerNight": "abc", "bedrooms": "3"})
    assert junk.pricePerNight == 0
    assert junk.bedrooms == 3


def test_concurrent_creates_get_distinct_ids():
    repo = DocumentBookingStateRepository(InMemoryDocumentStore(seed_document()))

    def _worker():
        for _ in range(10):
            repo.create_booking(_booking_fields())

    threads = [threading.Thread(target=_worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ids = [b.id for b in repo.list_bookings_for_apartment(1)]
    assert sorted(ids) == list(range(1, 41))


def test_document_failing_the_schema_is_storage_unavailable():
    legacy = seed_document()
    legacy["lastIds"] = legacy.pop("counters")
    legacy["apartments"][0]["pricePerNight"] = None
    repo = DocumentBookingStateRepository(InMemoryDocumentStore(legacy))

    with pytest.raises(StorageUnavailable) as exc:
        repo.list_apartments()
    assert exc.value.status_code == 503
    assert exc.value.details["path"] == "<memory>"
    assert exc.value.reason.startswith("invalid document")


def test_negative_price_is_clamped(memory_repo):
    apt = memory_repo.add_apartment({"name": "A", "location": "B", "pricePerNight": "-50"})
    assert apt.pricePerNight == 0
