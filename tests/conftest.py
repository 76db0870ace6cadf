"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Event / weather factories
- File-backed stores in a temporary DATA_DIR
- Test client (FastAPI TestClient) with service dependencies overridden
"""

from datetime import date, datetime
from typing import Generator, Optional, Union
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.deps import (
    get_calendar_service,
    get_config_store,
    get_credentials,
    get_fanout,
    get_refresh_service,
    get_weather_service,
)
from app.main import app
from app.schemas.calendar import Event, WeatherEntry
from app.schemas.config import CalendarSource, DisplayConfig
from app.services.display_config import DisplayConfigStore
from app.services.refresh_service import RefreshService
from app.services.reload_fanout import ReloadFanout
from app.services.token_store import TokenStore


# ---------------------------------------------------------------------------
# FACTORIES
# ---------------------------------------------------------------------------


def make_event(
    event_id: str,
    start: Union[str, date, datetime],
    end: Optional[Union[str, date, datetime]] = None,
    title: str = "",
    source_id: str = "family@group.calendar.google.com",
    color: Optional[str] = "#4a90d9",
    all_day: Optional[bool] = None,
) -> Event:
    """
    Build an Event; all_day defaults to True for date-only starts.

    Strings go through the same parsing as API payloads.
    """
    event = Event(
        id=event_id,
        title=title or event_id,
        start=start,
        end=end,
        source_id=source_id,
        color=color,
    )
    if all_day is None:
        all_day = not isinstance(event.start, datetime)
    return event.model_copy(update={"all_day": all_day})


def make_weather(day: str, emoji=("☀️",), code: str = "100") -> WeatherEntry:
    return WeatherEntry(
        date_key=day,
        emoji=list(emoji),
        weather="晴れ",
        weather_code=code,
        precipitation_probability="10",
        reliability_class="A",
    )


@pytest.fixture
def event_factory():
    return make_event


@pytest.fixture
def weather_factory():
    return make_weather


# ---------------------------------------------------------------------------
# STORES
# ---------------------------------------------------------------------------


@pytest.fixture
def config_store(tmp_path) -> DisplayConfigStore:
    store = DisplayConfigStore(tmp_path / "calendars.json")
    store.save(
        DisplayConfig(
            calendars=[
                CalendarSource(id="family@group.calendar.google.com", name="Family", color="#4a90d9"),
                CalendarSource(
                    id="ja.japanese#holiday@group.v.calendar.google.com",
                    name="祝日",
                    color="#d32f2f",
                    is_holiday=True,
                ),
            ]
        )
    )
    return store


@pytest.fixture
def token_store(tmp_path) -> TokenStore:
    return TokenStore(tmp_path / "tokens" / "token.json")


# ---------------------------------------------------------------------------
# APPLICATION FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def credentials():
    """Credential manager double: authenticated by default."""
    manager = MagicMock()
    manager.is_authenticated = AsyncMock(return_value=True)
    manager.get_access_token = AsyncMock(return_value="ya29.test")
    manager.complete_login = AsyncMock()
    manager.reset = AsyncMock(return_value=True)
    manager.auth_client = MagicMock()
    manager.auth_client.is_configured = True
    manager.auth_client.generate_state.return_value = "state-123"
    manager.auth_client.get_authorization_url.return_value = (
        "https://accounts.google.com/o/oauth2/v2/auth?state=state-123"
    )
    return manager


@pytest.fixture
def calendars():
    service = MagicMock()
    service.get_range_events = AsyncMock(return_value=[])
    service.list_calendars = AsyncMock(return_value=[])
    return service


@pytest.fixture
def weather():
    service = MagicMock()
    service.get_entries = AsyncMock(return_value=[])
    return service


@pytest.fixture
def fanout() -> ReloadFanout:
    return ReloadFanout()


@pytest.fixture
def refresher(calendars, weather, config_store, fanout) -> RefreshService:
    return RefreshService(
        calendars=calendars,
        weather=weather,
        config_store=config_store,
        fanout=fanout,
        interval_seconds=600,
    )


@pytest.fixture
def admin_password(monkeypatch) -> str:
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "s3cret")
    return "s3cret"


@pytest.fixture
def client(
    credentials, calendars, weather, fanout, refresher, config_store
) -> Generator[TestClient, None, None]:
    """
    Test client with every service dependency overridden.

    Not used as a context manager, so the lifespan (and its background
    refresh loop) never starts.
    """
    app.dependency_overrides[get_credentials] = lambda: credentials
    app.dependency_overrides[get_calendar_service] = lambda: calendars
    app.dependency_overrides[get_weather_service] = lambda: weather
    app.dependency_overrides[get_fanout] = lambda: fanout
    app.dependency_overrides[get_refresh_service] = lambda: refresher
    app.dependency_overrides[get_config_store] = lambda: config_store

    yield TestClient(app)

    app.dependency_overrides.clear()
