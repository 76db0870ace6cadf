"""
Calendar router - the display page and its JSON endpoints.

Endpoints:
==========
- GET  /                   → Kiosk HTML grid (redirects to /setup when
                             Google authorization is needed)
- GET  /setup              → Google account connection page
- GET  /api/calendar       → Raw events for a 28-day range
- GET  /api/calendar/grid  → The computed grid as JSON
- POST /api/refresh        → Refresh events and weather now
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from app.core.config import settings
from app.deps import (
    get_calendar_service,
    get_config_store,
    get_credentials,
    get_refresh_service,
)
from app.environments.google.calendar import CalendarRenderer
from app.schemas.config import DisplayConfig
from app.services.calendar_layout import build_calendar_view, serialize_calendar_view
from app.services.calendar_service import (
    DEFAULT_RANGE_DAYS,
    CalendarFetchError,
    CalendarService,
    NotAuthorizedError,
)
from app.services.display_config import ConfigError, DisplayConfigStore
from app.services.google_credentials import GoogleCredentialManager
from app.services.refresh_service import RefreshService


logger = logging.getLogger("wallcal.routers.calendar")

# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(tags=["calendar"])


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _load_config(store: DisplayConfigStore) -> DisplayConfig:
    try:
        return store.load()
    except ConfigError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )


def _parse_start_date(value: Optional[str], tz: ZoneInfo) -> date:
    """Accept YYYY-MM-DD or a full ISO timestamp; default to today."""
    if not value:
        return datetime.now(tz).date()
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="startDate must be an ISO date (YYYY-MM-DD)",
        )
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed.date()


async def _current_view(
    refresher: RefreshService,
    config: DisplayConfig,
    today: date,
):
    # First request after start-up may arrive before the background loop ran.
    if refresher.state.last_updated is None and refresher.state.last_error is None:
        await refresher.refresh(today=today, notify=False)

    tz = ZoneInfo(config.display.timezone)
    return build_calendar_view(
        refresher.state.events,
        refresher.state.weather,
        anchor=today,
        week_count=settings.WEEK_COUNT,
        week_start=config.display.week_start,
        tz=tz,
        today=today,
        holiday_sources=config.holiday_source_ids(),
    )


# ---------------------------------------------------------------------------
# PAGES
# ---------------------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
async def display_page(
    request: Request,
    credentials: GoogleCredentialManager = Depends(get_credentials),
    config_store: DisplayConfigStore = Depends(get_config_store),
    refresher: RefreshService = Depends(get_refresh_service),
):
    """
    The wall display itself.

    Redirects to /setup until a Google account is connected.
    """
    if refresher.state.auth_required or not await credentials.is_authenticated():
        return RedirectResponse(url="/setup", status_code=status.HTTP_302_FOUND)

    try:
        config = config_store.load()
    except ConfigError as e:
        logger.error(f"Cannot render display: {e}")
        renderer = CalendarRenderer()
        return HTMLResponse(
            content=renderer.render_error(str(e)),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    tz = ZoneInfo(config.display.timezone)
    now = datetime.now(tz)
    weeks = await _current_view(refresher, config, now.date())

    if refresher.state.auth_required:
        return RedirectResponse(url="/setup", status_code=status.HTTP_302_FOUND)

    renderer = CalendarRenderer(tz=tz, reconnect_ms=settings.SSE_RECONNECT_MS)
    html = renderer.render_grid(
        weeks,
        today=now.date(),
        now=now,
        last_updated=refresher.state.last_updated,
        error=refresher.state.last_error,
        week_start=config.display.week_start,
        title=settings.APP_NAME,
        admin_url=str(request.url_for("admin_page")),
    )
    return HTMLResponse(content=html)


@router.get("/setup", response_class=HTMLResponse)
async def setup_page(
    error: Optional[str] = Query(None, description="Error code from the OAuth callback"),
    credentials: GoogleCredentialManager = Depends(get_credentials),
):
    """Google account connection page."""
    renderer = CalendarRenderer()
    return HTMLResponse(
        content=renderer.render_setup(
            authenticated=await credentials.is_authenticated(),
            error_code=error,
        )
    )


# ---------------------------------------------------------------------------
# JSON ENDPOINTS
# ---------------------------------------------------------------------------


@router.get("/api/calendar")
async def get_calendar_events(
    start_date: Optional[str] = Query(None, alias="startDate"),
    calendars: CalendarService = Depends(get_calendar_service),
    config_store: DisplayConfigStore = Depends(get_config_store),
):
    """
    Events of all configured calendars for [startDate, startDate + 28 days).

    Returns:
        {"events": [...], "startDate": "...", "endDate": "..."}
    """
    config = _load_config(config_store)
    tz = ZoneInfo(config.display.timezone)
    start = _parse_start_date(start_date, tz)

    try:
        events = await calendars.get_range_events(start, days=DEFAULT_RANGE_DAYS, config=config)
    except NotAuthorizedError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated with Google",
        )
    except CalendarFetchError as e:
        logger.error(f"Error fetching calendar data: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch calendar data",
        )

    return {
        "events": [event.model_dump(mode="json", by_alias=True) for event in events],
        "startDate": start.isoformat(),
        "endDate": (start + timedelta(days=DEFAULT_RANGE_DAYS)).isoformat(),
    }


@router.get("/api/calendar/grid")
async def get_calendar_grid(
    config_store: DisplayConfigStore = Depends(get_config_store),
    refresher: RefreshService = Depends(get_refresh_service),
):
    """The grid exactly as the display draws it."""
    config = _load_config(config_store)
    today = datetime.now(ZoneInfo(config.display.timezone)).date()
    weeks = await _current_view(refresher, config, today)

    return {
        "today": today.isoformat(),
        "weekStart": config.display.week_start,
        "weeks": serialize_calendar_view(weeks),
        "lastUpdated": (
            refresher.state.last_updated.isoformat() if refresher.state.last_updated else None
        ),
        "error": refresher.state.last_error,
        "authRequired": refresher.state.auth_required,
    }


@router.post("/api/refresh")
async def refresh_now(
    refresher: RefreshService = Depends(get_refresh_service),
):
    """Refresh events and weather immediately (the display's retry button)."""
    state = await refresher.refresh()
    return {
        "success": state.last_error is None,
        "events": len(state.events),
        "weatherDays": len(state.weather),
        "lastUpdated": state.last_updated.isoformat() if state.last_updated else None,
        "error": state.last_error,
        "authRequired": state.auth_required,
    }
