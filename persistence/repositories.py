from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol, TypeVar

from .booking_state import ApartmentRecord, BookingRecord, DocumentBookingStateRepository
from .disk_store import DiskJsonDocumentStore
from .interfaces import DocumentStore
from .paths import document_path

T = TypeVar("T")


class AsyncBookingRepository(Protocol):
    async def initialize(self) -> bool: ...

    async def list_apartments(self) -> list[ApartmentRecord]: ...
    async def get_apartment(self, apartment_id: int) -> ApartmentRecord | None: ...
    async def add_apartment(self, fields: Mapping[str, Any]) -> ApartmentRecord: ...

    async def list_bookings_for_apartment(self, apartment_id: int) -> list[BookingRecord]: ...
    async def get_booking(self, booking_id: int) -> BookingRecord | None: ...
    async def create_booking(self, fields: Mapping[str, Any]) -> BookingRecord: ...

    async def call(self, fn: Callable[..., T], *args: Any) -> T: ...


class AsyncDocumentBookingRepository(AsyncBookingRepository):
    """
    Async wrapper around DocumentBookingStateRepository.
    Uses asyncio.to_thread to avoid blocking the event loop on file I/O.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._repo = DocumentBookingStateRepository(store)

    @property
    def sync(self) -> DocumentBookingStateRepository:
        return self._repo

    async def initialize(self) -> bool:
        return await asyncio.to_thread(self._repo.initialize)

    async def list_apartments(self) -> list[ApartmentRecord]:
        return await asyncio.to_thread(self._repo.list_apartments)

    async def get_apartment(self, apartment_id: int) -> ApartmentRecord | None:
        return await asyncio.to_thread(self._repo.get_apartment, apartment_id)

    async def add_apartment(self, fields: Mapping[str, Any]) -> ApartmentRecord:
        return await asyncio.to_thread(self._repo.add_apartment, fields)

    async def list_bookings_for_apartment(self, apartment_id: int) -> list[BookingRecord]:
        return await asyncio.to_thread(self._repo.list_bookings_for_apartment, apartment_id)

    async def get_booking(self, booking_id: int) -> BookingRecord | None:
        return await asyncio.to_thread(self._repo.get_booking, booking_id)

    async def create_booking(self, fields: Mapping[str, Any]) -> BookingRecord:
        return await asyncio.to_thread(self._repo.create_booking, fields)

    async def call(self, fn: Callable[..., T], *args: Any) -> T:
        """Run fn(sync_repo, *args) on a worker thread."""
        return await asyncio.to_thread(fn, self._repo, *args)


class AsyncDiskBookingRepository(AsyncDocumentBookingRepository):
    """Disk-backed repository reading and writing data/db.json (or `path`)."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = document_path(path)
        super().__init__(DiskJsonDocumentStore(self._path))

    @property
    def path(self) -> Path:
        return self._path
