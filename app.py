from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from dotenv import load_dotenv

from errors import BookingAppError
from persistence.paths import project_root
from settings import get_settings

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    load_dotenv("local.env")

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    from endpoints.admin_endpoints import router as admin_router
    from endpoints.site_endpoints import BOOKING_REPO, render_error, router as site_router

    # Seed data/db.json on first run; an existing document is never touched.
    if BOOKING_REPO.sync.initialize():
        logger.info("Initialized booking document at %s", BOOKING_REPO.path)

    app = FastAPI(title=settings.app_name)

    @app.exception_handler(BookingAppError)
    async def booking_app_error_handler(request: Request, exc: BookingAppError) -> HTMLResponse:
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s %s", request.method, request.url.path, exc.message, exc.details)
        return render_error(request, exc)

    app.include_router(site_router)
    app.include_router(admin_router)

    app.mount("/public", StaticFiles(directory=str(project_root() / "public")), name="public")

    return app


app = create_app()
