"""
Dependencies module - reusable FastAPI dependencies for route handlers.

Service getters return the module-level singletons so tests can swap them
through app.dependency_overrides. require_admin guards the admin API with
HTTP Basic credentials.
"""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from app.core.config import settings
from app.services.calendar_service import CalendarService, calendar_service
from app.services.display_config import DisplayConfigStore, display_config_store
from app.services.google_credentials import GoogleCredentialManager, google_credentials
from app.services.refresh_service import RefreshService, refresh_service
from app.services.reload_fanout import ReloadFanout, reload_fanout
from app.services.weather_service import WeatherService, weather_service

ADMIN_USERNAME = "admin"

# ---------------------------------------------------------------------------
# SECURITY SCHEME
# ---------------------------------------------------------------------------
# auto_error=False: a missing header reaches require_admin, which answers
# 500 first when no admin password is configured at all.
security = HTTPBasic(auto_error=False, realm="Admin Area")


def require_admin(credentials: HTTPBasicCredentials = Depends(security)) -> str:
    """
    Validate HTTP Basic credentials for the admin API.

    Returns:
        The admin username

    Raises:
        500: If ADMIN_PASSWORD is not configured
        401: If credentials are missing or wrong
    """
    if not settings.ADMIN_PASSWORD:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Admin password not configured",
        )

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required" if credentials is None else "Invalid credentials",
        headers={"WWW-Authenticate": 'Basic realm="Admin Area"'},
    )
    if credentials is None:
        raise unauthorized

    # Constant-time comparison of both fields.
    user_ok = secrets.compare_digest(
        credentials.username.encode("utf-8"), ADMIN_USERNAME.encode("utf-8")
    )
    password_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8")
    )
    if not (user_ok and password_ok):
        raise unauthorized

    return credentials.username


# ---------------------------------------------------------------------------
# SERVICE GETTERS
# ---------------------------------------------------------------------------


def get_config_store() -> DisplayConfigStore:
    return display_config_store


def get_credentials() -> GoogleCredentialManager:
    return google_credentials


def get_calendar_service() -> CalendarService:
    return calendar_service


def get_weather_service() -> WeatherService:
    return weather_service


def get_refresh_service() -> RefreshService:
    return refresh_service


def get_fanout() -> ReloadFanout:
    return reload_fanout
