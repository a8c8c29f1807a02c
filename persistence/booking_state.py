from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, ContextManager, Mapping, Protocol

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from availability import to_iso
from errors import StorageUnavailable

from .interfaces import DocumentStore


class ApartmentRecord(BaseModel):
    id: int
    name: str
    location: str
    description: str = ""
    bedrooms: int = 1
    pricePerNight: int | float = 0
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)


class BookingRecord(BaseModel):
    id: int
    apartmentId: int
    fullName: str
    phone: str
    email: str = ""
    checkIn: str
    checkOut: str
    totalPrice: int | float = 0
    createdAt: str


class CountersRecord(BaseModel):
    apartment: int = 0
    booking: int = 0


class BookingDataDoc(BaseModel):
    """
    Mirrors the on-disk db.json schema:
      {
        "counters": { "apartment": 3, "booking": 0 },
        "apartments": [ {...}, ... ],
        "bookings": [ {...}, ... ]
      }
    """

    counters: CountersRecord = Field(default_factory=CountersRecord)
    apartments: list[ApartmentRecord] = Field(default_factory=list)
    bookings: list[BookingRecord] = Field(default_factory=list)

    @classmethod
    def from_disk_doc(cls, doc: Mapping[str, Any]) -> "BookingDataDoc":
        # Legacy layout: { "lastIds": { "apartment": N, "booking": M }, ... }
        if "counters" not in doc and isinstance(doc.get("lastIds"), Mapping):
            doc = {**doc, "counters": doc["lastIds"]}
            doc.pop("lastIds", None)
        parsed = cls.model_validate(doc)
        parsed.normalize_counters()
        return parsed

    def to_disk_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def normalize_counters(self) -> None:
        """Raise each counter to at least the largest id already stored."""
        if self.apartments:
            self.counters.apartment = max(self.counters.apartment, max(a.id for a in self.apartments))
        if self.bookings:
            self.counters.booking = max(self.counters.booking, max(b.id for b in self.bookings))


SEED_APARTMENTS: list[dict[str, Any]] = [
    {
        "id": 1,
        "name": "جناح ديلوكس - البحر",
        "location": "كورنيش جدة",
        "description": "إطلالة بحرية رائعة مع صالة واسعة ومطبخ مجهز بالكامل.",
        "bedrooms": 2,
        "pricePerNight": 480,
        "amenities": ["واي فاي", "موقف سيارات", "مسبح", "مطبخ"],
        "images": ["/public/img/apt1.jpg"],
    },
    {
        "id": 2,
        "name": "شقة عائلية - المدينة",
        "location": "الرياض - العليا",
        "description": "خيار ممتاز للعوائل بالقرب من المولات والمطاعم.",
        "bedrooms": 3,
        "pricePerNight": 620,
        "amenities": ["واي فاي", "تلفاز", "مطبخ", "خدمة تنظيف"],
        "images": ["/public/img/apt2.jpg"],
    },
    {
        "id": 3,
        "name": "استوديو أنيق",
        "location": "الخبر - الواجهة البحرية",
        "description": "استوديو مريح لرحلات العمل القصيرة.",
        "bedrooms": 1,
        "pricePerNight": 300,
        "amenities": ["واي فاي", "موقف سيارات"],
        "images": ["/public/img/apt3.jpg"],
    },
]


def seed_document() -> dict[str, Any]:
    doc = BookingDataDoc.model_validate(
        {
            "counters": {"apartment": len(SEED_APARTMENTS), "booking": 0},
            "apartments": SEED_APARTMENTS,
            "bookings": [],
        }
    )
    return doc.to_disk_doc()


def coerce_number(value: Any, default: int | float) -> int | float:
    """Loose numeric coercion for form input; integral values come back as int."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        n = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            n = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if not math.isfinite(n):
        return default
    return int(n) if n.is_integer() else n


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(v) for v in value]


def _timestamp(value: Any) -> str:
    if isinstance(value, datetime):
        return to_iso(value)
    return str(value)


class BookingStateRepository(Protocol):
    @property
    def lock(self) -> ContextManager[Any]:
        ...

    def list_apartments(self) -> list[ApartmentRecord]:
        ...

    def get_apartment(self, apartment_id: int) -> ApartmentRecord | None:
        ...

    def add_apartment(self, fields: Mapping[str, Any]) -> ApartmentRecord:
        ...

    def list_bookings_for_apartment(self, apartment_id: int) -> list[BookingRecord]:
        ...

    def get_booking(self, booking_id: int) -> BookingRecord | None:
        ...

    def create_booking(self, fields: Mapping[str, Any], *, created_at: str | None = None) -> BookingRecord:
        ...


class DocumentBookingStateRepository(BookingStateRepository):
    """
    Apartment and booking operations over one DocumentStore.

    Each call loads the whole document, applies at most one mutation and
    saves it back, all while holding the store's lock.
    """

    def __init__(self, store: DocumentStore):
        self._store = store

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def lock(self) -> ContextManager[Any]:
        return self._store.lock

    def initialize(self) -> bool:
        return self._store.initialize(seed_document())

    def _load(self) -> BookingDataDoc:
        raw = self._store.load()
        try:
            return BookingDataDoc.from_disk_doc(raw)
        except SchemaError as e:
            raise StorageUnavailable(self._store.description, f"invalid document: {e}") from e

    def _persist(self, doc: BookingDataDoc) -> None:
        self._store.save(doc.to_disk_doc())

    def list_apartments(self) -> list[ApartmentRecord]:
        with self.lock:
            return list(self._load().apartments)

    def get_apartment(self, apartment_id: int) -> ApartmentRecord | None:
        with self.lock:
            return next((a for a in self._load().apartments if a.id == apartment_id), None)

    def add_apartment(self, fields: Mapping[str, Any]) -> ApartmentRecord:
        with self.lock:
            doc = self._load()
            doc.counters.apartment += 1
            bedrooms = int(coerce_number(fields.get("bedrooms"), 1))
            apartment = ApartmentRecord(
                id=doc.counters.apartment,
                name=str(fields.get("name") or ""),
                location=str(fields.get("location") or ""),
                description=str(fields.get("description") or ""),
                bedrooms=bedrooms if bedrooms >= 1 else 1,
                pricePerNight=max(0, coerce_number(fields.get("pricePerNight"), 0)),
                amenities=_string_list(fields.get("amenities")),
                images=_string_list(fields.get("images")),
            )
            doc.apartments.append(apartment)
            self._persist(doc)
            return apartment

    def list_bookings_for_apartment(self, apartment_id: int) -> list[BookingRecord]:
        with self.lock:
            return [b for b in self._load().bookings if b.apartmentId == apartment_id]

    def get_booking(self, booking_id: int) -> BookingRecord | None:
        with self.lock:
            return next((b for b in self._load().bookings if b.id == booking_id), None)

    def create_booking(self, fields: Mapping[str, Any], *, created_at: str | None = None) -> BookingRecord:
        # No overlap or date-order checks here; see booking_requests.submit_booking.
        with self.lock:
            doc = self._load()
            doc.counters.booking += 1
            booking = BookingRecord(
                id=doc.counters.booking,
                apartmentId=int(fields["apartmentId"]),
                fullName=str(fields.get("fullName") or ""),
                phone=str(fields.get("phone") or ""),
                email=str(fields.get("email") or ""),
                checkIn=_timestamp(fields["checkIn"]),
                checkOut=_timestamp(fields["checkOut"]),
                totalPrice=coerce_number(fields.get("totalPrice"), 0),
                createdAt=created_at or to_iso(datetime.now(timezone.utc)),
            )
            doc.bookings.append(booking)
            self._persist(doc)
            return booking
