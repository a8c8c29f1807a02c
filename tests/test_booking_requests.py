from __future__ import annotations

import pytest

from booking_requests import (
    MSG_CHECKOUT_NOT_AFTER_CHECKIN,
    MSG_INVALID_DATES,
    MSG_MISSING_BOOKING_FIELDS,
    split_list,
    submit_apartment,
    submit_booking,
    validate_booking_form,
)
from errors import NotFound, Unavailable, ValidationError


def _form(**overrides):
    form = {
        "fullName": "Sara Ahmed",
        "phone": "0500000000",
        "email": "",
        "checkIn": "2024-06-01",
        "checkOut": "2024-06-04",
    }
    form.update(overrides)
    return form


def test_first_booking_on_seed_store(memory_repo):
    booking = submit_booking(memory_repo, 1, _form())
    assert booking.id == 1
    assert booking.totalPrice == 1440
    assert booking.apartmentId == 1
    assert booking.checkIn == "2024-06-01T00:00:00+00:00"
    assert booking.checkOut == "2024-06-04T00:00:00+00:00"


def test_overlapping_request_is_unavailable(memory_repo):
    submit_booking(memory_repo, 1, _form())
    with pytest.raises(Unavailable):
        submit_booking(memory_repo, 1, _form(checkIn="2024-06-03", checkOut="2024-06-05"))
    assert len(memory_repo.list_bookings_for_apartment(1)) == 1


def test_back_to_back_stays_are_allowed(memory_repo):
    submit_booking(memory_repo, 1, _form())
    nxt = submit_booking(memory_repo, 1, _form(checkIn="2024-06-04", checkOut="2024-06-06"))
    assert nxt.id == 2
    assert nxt.totalPrice == 960


def test_same_dates_on_another_apartment_are_fine(memory_repo):
    submit_booking(memory_repo, 1, _form())
    other = submit_booking(memory_repo, 3, _form())
    assert other.totalPrice == 900


def test_checkout_before_checkin_leaves_store_untouched(memory_repo):
    store = memory_repo.store
    before = store.load()
    with pytest.raises(ValidationError) as exc:
        submit_booking(memory_repo, 1, _form(checkIn="2024-06-04", checkOut="2024-06-01"))
    assert exc.value.message == MSG_CHECKOUT_NOT_AFTER_CHECKIN
    assert store.load() == before
    assert store.save_count == 0


def test_same_day_checkout_is_rejected():
    with pytest.raises(ValidationError):
        validate_booking_form(_form(checkOut="2024-06-01"))


def test_unknown_apartment_is_not_found(memory_repo):
    with pytest.raises(NotFound) as exc:
        submit_booking(memory_repo, 999, _form())
    assert exc.value.status_code == 404


def test_not_found_wins_over_bad_form(memory_repo):
    with pytest.raises(NotFound):
        submit_booking(memory_repo, 999, {})


@pytest.mark.parametrize("missing", ["fullName", "phone", "checkIn", "checkOut"])
def test_required_fields(missing):
    with pytest.raises(ValidationError) as exc:
        validate_booking_form(_form(**{missing: "   "}))
    assert exc.value.message == MSG_MISSING_BOOKING_FIELDS
    assert exc.value.details == {"field": missing}


def test_missing_fields_reported_before_bad_dates():
    with pytest.raises(ValidationError) as exc:
        validate_booking_form(_form(phone="", checkIn="garbage"))
    assert exc.value.message == MSG_MISSING_BOOKING_FIELDS


def test_invalid_dates():
    with pytest.raises(ValidationError) as exc:
        validate_booking_form(_form(checkOut="2024-02-30"))
    assert exc.value.message == MSG_INVALID_DATES


def test_email_is_optional(memory_repo):
    booking = submit_booking(memory_repo, 2, _form(email=None))
    assert booking.email == ""


def test_split_list():
    assert split_list(" wifi, pool ,, kitchen ") == ["wifi", "pool", "kitchen"]
    assert split_list("") == []
    assert split_list(None) == []


def test_submit_apartment(memory_repo):
    apt = submit_apartment(
        memory_repo,
        {
            "name": " Sea View ",
            "location": "Jeddah",
            "pricePerNight": "350",
            "bedrooms": "",
            "amenities": "wifi, pool",
            "images": "/public/img/a.jpg,/public/img/b.jpg",
        },
    )
    assert apt.id == 4
    assert apt.name == "Sea View"
    assert apt.bedrooms == 1
    assert apt.pricePerNight == 350
    assert apt.amenities == ["wifi", "pool"]
    assert apt.images == ["/public/img/a.jpg", "/public/img/b.jpg"]


@pytest.mark.parametrize("missing", ["name", "location", "pricePerNight"])
def test_submit_apartment_requires_fields(memory_repo, missing):
    form = {"name": "A", "location": "B", "pricePerNight": "100"}
    form[missing] = ""
    with pytest.raises(ValidationError):
        submit_apartment(memory_repo, form)
    assert len(memory_repo.list_apartments()) == 3
