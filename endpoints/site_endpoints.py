from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from availability import parse_timestamp
from booking_requests import submit_booking
from errors import BookingAppError, NotFound, StorageUnavailable
from persistence.paths import project_root
from persistence.repositories import AsyncDiskBookingRepository
from settings import get_settings

router = APIRouter(tags=["site"])
logger = logging.getLogger(__name__)

SETTINGS = get_settings()
DEBUG_LOG_REQUESTS = SETTINGS.debug_log_requests

BOOKING_REPO = AsyncDiskBookingRepository(SETTINGS.data_file)

templates = Jinja2Templates(directory=str(project_root() / "templates"))


def _day(value: Any) -> str:
    dt = parse_timestamp(value)
    return dt.date().isoformat() if dt is not None else str(value)


def _money(value: Any) -> str:
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.2f}"
    return f"{int(value):,}"


templates.env.filters["day"] = _day
templates.env.filters["money"] = _money


def render(request: Request, name: str, context: dict[str, Any], *, status_code: int = 200) -> HTMLResponse:
    """Render a page with the layout globals every template expects."""
    ctx = {
        "app_name": SETTINGS.app_name,
        "current_path": request.url.path,
        **context,
    }
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)


def render_error(request: Request, exc: BookingAppError) -> HTMLResponse:
    return render(
        request,
        "message.html",
        {"title": exc.message, "message": exc.message},
        status_code=exc.status_code,
    )


def parse_positive_id(raw: Any) -> int | None:
    """Path/query ids: anything that is not a positive integer is None."""
    if isinstance(raw, bool):
        return None
    try:
        n = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return n if n > 0 else None


@router.get("/")
async def home(request: Request) -> HTMLResponse:
    apartments = await BOOKING_REPO.list_apartments()
    return render(request, "home.html", {"title": "الرئيسية", "apartments": apartments})


@router.get("/apartments")
async def apartments_page(request: Request) -> HTMLResponse:
    apartments = await BOOKING_REPO.list_apartments()
    return render(request, "apartments.html", {"title": "الشقق المتاحة", "apartments": apartments})


@router.get("/apartments/{apartment_id}")
async def apartment_page(request: Request, apartment_id: str) -> HTMLResponse:
    aid = parse_positive_id(apartment_id)
    apartment = await BOOKING_REPO.get_apartment(aid) if aid is not None else None
    if apartment is None:
        raise NotFound("Apartment", apartment_id)
    bookings = await BOOKING_REPO.list_bookings_for_apartment(apartment.id)
    return render(
        request,
        "apartment.html",
        {"title": apartment.name, "apartment": apartment, "bookings": bookings},
    )


@router.post("/apartments/{apartment_id}/book")
async def book_apartment(
    apartment_id: str,
    fullName: str = Form(""),
    phone: str = Form(""),
    email: str = Form(""),
    checkIn: str = Form(""),
    checkOut: str = Form(""),
) -> RedirectResponse:
    aid = parse_positive_id(apartment_id)
    if aid is None:
        raise NotFound("Apartment", apartment_id)

    form = {
        "fullName": fullName,
        "phone": phone,
        "email": email,
        "checkIn": checkIn,
        "checkOut": checkOut,
    }
    try:
        booking = await BOOKING_REPO.call(submit_booking, aid, form)
    except BookingAppError as e:
        if DEBUG_LOG_REQUESTS:
            logger.info("BOOK apartment=%s rejected: %s (%s)", aid, type(e).__name__, e.details)
        raise

    if DEBUG_LOG_REQUESTS:
        logger.info(
            "BOOK apartment=%s booking=%s stay=%s..%s total=%s",
            aid,
            booking.id,
            booking.checkIn,
            booking.checkOut,
            booking.totalPrice,
        )
    return RedirectResponse(url=f"/success?bookingId={booking.id}", status_code=302)


@router.get("/success", response_model=None)
async def booking_success(request: Request, bookingId: str | None = None) -> HTMLResponse | RedirectResponse:
    booking_id = parse_positive_id(bookingId)
    if booking_id is None:
        return RedirectResponse(url="/", status_code=302)
    booking = await BOOKING_REPO.get_booking(booking_id)
    apartment = await BOOKING_REPO.get_apartment(booking.apartmentId) if booking is not None else None
    return render(
        request,
        "booking_success.html",
        {
            "title": "تم تأكيد الحجز",
            "booking_id": booking_id,
            "booking": booking,
            "apartment": apartment,
        },
    )


@router.get("/healthz")
async def healthz() -> JSONResponse:
    try:
        apartments = await BOOKING_REPO.list_apartments()
    except StorageUnavailable as e:
        return JSONResponse({"status": "unavailable", "reason": e.reason}, status_code=503)
    return JSONResponse({"status": "ok", "apartments": len(apartments)})
