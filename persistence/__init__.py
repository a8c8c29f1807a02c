from __future__ import annotations

from .booking_state import (
    ApartmentRecord,
    BookingDataDoc,
    BookingRecord,
    BookingStateRepository,
    DocumentBookingStateRepository,
    seed_document,
)
from .disk_store import DiskJsonDocumentStore
from .interfaces import DocumentStore
from .memory_store import InMemoryDocumentStore
from .repositories import (
    AsyncBookingRepository,
    AsyncDiskBookingRepository,
    AsyncDocumentBookingRepository,
)

__all__ = [
    "ApartmentRecord",
    "BookingRecord",
    "BookingDataDoc",
    "BookingStateRepository",
    "DocumentBookingStateRepository",
    "seed_document",
    "DocumentStore",
    "DiskJsonDocumentStore",
    "InMemoryDocumentStore",
    "AsyncBookingRepository",
    "AsyncDocumentBookingRepository",
    "AsyncDiskBookingRepository",
]
