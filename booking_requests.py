from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from availability import is_available, nights_between, parse_timestamp, to_iso
from errors import NotFound, Unavailable, ValidationError
from persistence.booking_state import ApartmentRecord, BookingRecord, BookingStateRepository

logger = logging.getLogger(__name__)

REQUIRED_BOOKING_FIELDS = ("fullName", "phone", "checkIn", "checkOut")
REQUIRED_APARTMENT_FIELDS = ("name", "location", "pricePerNight")

MSG_MISSING_BOOKING_FIELDS = "الرجاء تعبئة جميع الحقول المطلوبة"
MSG_INVALID_DATES = "تواريخ غير صحيحة"
MSG_CHECKOUT_NOT_AFTER_CHECKIN = "تاريخ المغادرة يجب أن يكون بعد تاريخ الوصول"
MSG_MISSING_APARTMENT_FIELDS = "الاسم والموقع والسعر مطلوبة"


@dataclass(frozen=True)
class BookingRequest:
    full_name: str
    phone: str
    email: str
    check_in: datetime
    check_out: datetime

    @property
    def nights(self) -> int:
        return nights_between(self.check_in, self.check_out)


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def _text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    return value.strip() if isinstance(value, str) else ""


def split_list(value: Any) -> list[str]:
    """`"a, b,,c"` -> `["a", "b", "c"]`."""
    if not isinstance(value, str):
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def validate_booking_form(form: Mapping[str, Any]) -> BookingRequest:
    """
    Checks a booking form in a fixed order and raises the first failure:

    1. required fields present
    2. both dates parse
    3. check-out strictly after check-in
    """
    missing = [k for k in REQUIRED_BOOKING_FIELDS if not _present(form.get(k))]
    if missing:
        raise ValidationError(MSG_MISSING_BOOKING_FIELDS, field=missing[0])

    check_in = parse_timestamp(form.get("checkIn"))
    check_out = parse_timestamp(form.get("checkOut"))
    if check_in is None or check_out is None:
        raise ValidationError(MSG_INVALID_DATES, field="checkIn" if check_in is None else "checkOut")

    if not check_out > check_in:
        raise ValidationError(MSG_CHECKOUT_NOT_AFTER_CHECKIN, field="checkOut")

    return BookingRequest(
        full_name=_text(form, "fullName"),
        phone=_text(form, "phone"),
        email=_text(form, "email"),
        check_in=check_in,
        check_out=check_out,
    )


def submit_booking(repo: BookingStateRepository, apartment_id: int, form: Mapping[str, Any]) -> BookingRecord:
    """
    Full booking flow: apartment lookup, form checks, availability, price, create.

    Runs under the repository lock so two submissions for overlapping dates
    cannot both pass the availability check.
    """
    with repo.lock:
        apartment = repo.get_apartment(apartment_id)
        if apartment is None:
            raise NotFound("Apartment", apartment_id)

        request = validate_booking_form(form)

        existing = repo.list_bookings_for_apartment(apartment_id)
        if not is_available(existing, request.check_in, request.check_out):
            logger.info(
                "BOOKING REJECTED: apartment=%s %s..%s overlaps an existing booking",
                apartment_id,
                request.check_in.date(),
                request.check_out.date(),
            )
            raise Unavailable(apartment_id)

        return repo.create_booking(
            {
                "apartmentId": apartment.id,
                "fullName": request.full_name,
                "phone": request.phone,
                "email": request.email,
                "checkIn": to_iso(request.check_in),
                "checkOut": to_iso(request.check_out),
                "totalPrice": request.nights * apartment.pricePerNight,
            }
        )


def submit_apartment(repo: BookingStateRepository, form: Mapping[str, Any]) -> ApartmentRecord:
    missing = [k for k in REQUIRED_APARTMENT_FIELDS if not _present(form.get(k))]
    if missing:
        raise ValidationError(MSG_MISSING_APARTMENT_FIELDS, field=missing[0])

    return repo.add_apartment(
        {
            "name": _text(form, "name"),
            "location": _text(form, "location"),
            "description": _text(form, "description"),
            "bedrooms": form.get("bedrooms") or 1,
            "pricePerNight": form.get("pricePerNight"),
            "amenities": split_list(form.get("amenities")),
            "images": split_list(form.get("images")),
        }
    )
