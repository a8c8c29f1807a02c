from __future__ import annotations

import logging

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from booking_requests import submit_apartment
from endpoints.site_endpoints import BOOKING_REPO, DEBUG_LOG_REQUESTS, render

# No authentication: the admin pages are open to anyone who can reach the app.
router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger(__name__)


@router.get("/apartments")
async def admin_apartments(request: Request) -> HTMLResponse:
    apartments = await BOOKING_REPO.list_apartments()
    return render(
        request,
        "admin_apartments.html",
        {"title": "لوحة التحكم - الشقق", "apartments": apartments},
    )


@router.get("/apartments/new")
async def admin_new_apartment(request: Request) -> HTMLResponse:
    return render(request, "admin_new_apartment.html", {"title": "إضافة شقة جديدة"})


@router.post("/apartments")
async def admin_create_apartment(
    name: str = Form(""),
    location: str = Form(""),
    description: str = Form(""),
    bedrooms: str = Form(""),
    pricePerNight: str = Form(""),
    amenities: str = Form(""),
    images: str = Form(""),
) -> RedirectResponse:
    form = {
        "name": name,
        "location": location,
        "description": description,
        "bedrooms": bedrooms,
        "pricePerNight": pricePerNight,
        "amenities": amenities,
        "images": images,
    }
    apartment = await BOOKING_REPO.call(submit_apartment, form)
    if DEBUG_LOG_REQUESTS:
        logger.info("ADMIN created apartment=%s name=%r", apartment.id, apartment.name)
    return RedirectResponse(url="/admin/apartments", status_code=302)
