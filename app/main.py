"""
Main application entry point - FastAPI app instance and configuration.
This is where the ASGI application is created and configured.
Run with: uvicorn app.main:app --port 3000
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging import configure_logging
from app.routers import admin, auth, calendar, sse, weather
from app.services.refresh_service import refresh_service


logger = logging.getLogger("wallcal.main")

VERSION = "1.0.0"


# ---------------------------------------------------------------------------
# LIFESPAN
# ---------------------------------------------------------------------------
# Start-up: configure logging, start the periodic event/weather refresh.
# Shutdown: cancel the refresh task.
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR or None)
    logger.info(f"Starting {settings.APP_NAME} (data dir: {settings.data_dir})")
    refresh_service.start()
    try:
        yield
    finally:
        await refresh_service.stop()


# ---------------------------------------------------------------------------
# CREATE FASTAPI APPLICATION
# ---------------------------------------------------------------------------
app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS MIDDLEWARE
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# calendar.router: /, /setup, /api/calendar, /api/calendar/grid, /api/refresh
# weather.router: /api/weather
# auth.router: /auth/login, /auth/callback, /auth/reset, /auth/status
# admin.router: /api/config, /api/calendars, /api/admin/reload
# admin.page_router: /admin
# sse.router: /api/sse/events
app.include_router(calendar.router)
app.include_router(weather.router)
app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(admin.page_router)
app.include_router(sse.router)


# ---------------------------------------------------------------------------
# ERROR HANDLING
# ---------------------------------------------------------------------------
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last-resort handler: log the traceback, hide details unless DEBUG."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    content = {"error": "Internal server error"}
    if settings.DEBUG:
        content["message"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# ---------------------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ---------------------------------------------------------------------------
@app.get("/api/status", tags=["health"])
def status_check():
    """
    Simple health check endpoint.

    Returns:
        {"status": "ok", "timestamp": "...", "version": "1.0.0",
         "refreshRunning": bool, "lastUpdated": "..." | null}
    """
    state = refresh_service.state
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
        "refreshRunning": refresh_service.running,
        "lastUpdated": state.last_updated.isoformat() if state.last_updated else None,
    }
