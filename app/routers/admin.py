"""
Admin router - display configuration and live reload (HTTP Basic protected).

Endpoints:
==========
- GET  /admin             → Admin page (config editor, calendar list, reset, reload)
- GET  /api/config        → Current calendars.json
- POST /api/config        → Validate and save a new configuration
- GET  /api/calendars     → Calendars of the connected Google account
- POST /api/admin/reload  → Tell every open display to reload
"""

import json
import logging
from typing import Any, Dict
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import HTMLResponse

from app.core.config import settings
from app.deps import (
    get_calendar_service,
    get_config_store,
    get_credentials,
    get_fanout,
    get_refresh_service,
    require_admin,
)
from app.environments.google.calendar import CalendarRenderer
from app.services.calendar_service import CalendarFetchError, CalendarService, NotAuthorizedError
from app.services.display_config import ConfigError, DisplayConfigStore, validate_config
from app.services.google_credentials import GoogleCredentialManager
from app.services.refresh_service import RefreshService
from app.services.reload_fanout import ReloadFanout


logger = logging.getLogger("wallcal.routers.admin")

router = APIRouter(prefix="/api", tags=["admin"], dependencies=[Depends(require_admin)])
page_router = APIRouter(tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/config")
async def get_config(
    config_store: DisplayConfigStore = Depends(get_config_store),
):
    try:
        config = config_store.load()
    except ConfigError as e:
        logger.error(f"Error reading config: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read configuration",
        )
    return config.model_dump(by_alias=True)


@router.post("/config")
async def save_config(
    payload: Dict[str, Any] = Body(...),
    config_store: DisplayConfigStore = Depends(get_config_store),
):
    """Replace the configuration; 400 with the validation problem when invalid."""
    try:
        config = validate_config(payload)
    except ConfigError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid configuration format: {e}",
        )

    try:
        config_store.save(config)
    except ConfigError as e:
        logger.error(f"Error saving config: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save configuration",
        )

    return {"success": True, "message": "Configuration saved successfully"}


@router.get("/calendars")
async def list_calendars(
    calendars: CalendarService = Depends(get_calendar_service),
):
    """Calendars the admin can pick from."""
    try:
        items = await calendars.list_calendars()
    except NotAuthorizedError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated with Google",
        )
    except CalendarFetchError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch calendar list",
        )

    return {
        "calendars": [
            item.model_dump(by_alias=True, exclude_none=True) for item in items
        ]
    }


@router.post("/admin/reload")
async def reload_displays(
    fanout: ReloadFanout = Depends(get_fanout),
):
    """Broadcast a reload to every connected display."""
    delivered = await fanout.broadcast_reload()
    logger.info(f"Admin reload sent to {delivered} clients")
    return {
        "success": True,
        "message": f"Reload command sent to {delivered} clients",
        "totalClients": delivered,
    }


# ---------------------------------------------------------------------------
# ADMIN PAGE
# ---------------------------------------------------------------------------


@page_router.get("/admin", response_class=HTMLResponse)
async def admin_page(
    config_store: DisplayConfigStore = Depends(get_config_store),
    credentials: GoogleCredentialManager = Depends(get_credentials),
    refresher: RefreshService = Depends(get_refresh_service),
):
    """
    Admin page for the JSON endpoints above.

    A configuration that fails to load is shown as raw text so it can be
    fixed and saved from the editor.
    """
    config_error = None
    timezone_name = settings.DISPLAY_TIMEZONE
    try:
        config = config_store.load()
        timezone_name = config.display.timezone
        config_json = json.dumps(config.model_dump(by_alias=True), ensure_ascii=False, indent=2)
    except ConfigError as e:
        config_error = str(e)
        try:
            config_json = config_store.path.read_text(encoding="utf-8")
        except OSError:
            config_json = ""

    renderer = CalendarRenderer(tz=ZoneInfo(timezone_name))
    return HTMLResponse(
        content=renderer.render_admin(
            config_json=config_json,
            authenticated=await credentials.is_authenticated(),
            last_updated=refresher.state.last_updated,
            last_error=refresher.state.last_error,
            config_error=config_error,
            title=f"{settings.APP_NAME} Admin",
        )
    )
