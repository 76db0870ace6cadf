"""
Tests for the HTTP endpoints.

These tests verify:
- The display page, setup redirect and grid JSON
- Calendar and weather JSON endpoints
- The OAuth callback error redirects
- HTTP Basic protection of the admin API
- Live reload through the admin endpoint
"""

import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from app.environments.base import AuthenticationError
from app.environments.google.calendar.schemas import CalendarInfo
from app.environments.jma import WeatherFetchError
from app.main import app
from app.services.calendar_service import CalendarFetchError, NotAuthorizedError


# ---------------------------------------------------------------------------
# DISPLAY PAGES
# ---------------------------------------------------------------------------


class TestDisplayPage:
    """Tests for GET / and GET /setup."""

    def test_renders_grid(self, client, calendars, event_factory):
        calendars.get_range_events.return_value = [
            event_factory("trip", "2024-06-10", "2024-06-13", title="家族旅行"),
        ]

        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert response.text.count('data-date="') == 28
        assert "/api/sse/events" in response.text
        assert "http://testserver/admin" in response.text

    def test_redirects_to_setup_without_token(self, client, credentials):
        credentials.is_authenticated.return_value = False

        response = client.get("/", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/setup"

    def test_redirects_when_google_rejects_token(self, client, calendars):
        calendars.get_range_events.side_effect = NotAuthorizedError("401")

        response = client.get("/", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/setup"

    def test_refresh_error_shows_retry(self, client, calendars):
        calendars.get_range_events.side_effect = CalendarFetchError("down")

        response = client.get("/")

        assert response.status_code == 200
        assert "カレンダーの取得に失敗しました" in response.text
        assert 'id="retry"' in response.text

    def test_broken_config_renders_error_page(self, client, config_store):
        config_store.path.write_text("{broken", encoding="utf-8")

        response = client.get("/")

        assert response.status_code == 500
        assert "Failed to load configuration" in response.text

    def test_setup_page(self, client, credentials):
        credentials.is_authenticated.return_value = False

        response = client.get("/setup", params={"error": "auth_denied"})

        assert response.status_code == 200
        assert "認証がキャンセルされました" in response.text
        assert 'href="/auth/login"' in response.text


# ---------------------------------------------------------------------------
# CALENDAR JSON
# ---------------------------------------------------------------------------


class TestCalendarApi:
    """Tests for /api/calendar, /api/calendar/grid and /api/refresh."""

    def test_events_for_range(self, client, calendars, event_factory):
        calendars.get_range_events.return_value = [
            event_factory("m", "2024-06-10T09:00:00+09:00", "2024-06-10T10:00:00+09:00", title="会議"),
        ]

        response = client.get("/api/calendar", params={"startDate": "2024-06-09"})

        assert response.status_code == 200
        data = response.json()
        assert data["startDate"] == "2024-06-09"
        assert data["endDate"] == "2024-07-07"
        assert data["events"][0]["title"] == "会議"
        assert data["events"][0]["allDay"] is False
        assert data["events"][0]["calendarId"] == "family@group.calendar.google.com"

    def test_invalid_start_date(self, client):
        response = client.get("/api/calendar", params={"startDate": "June 9th"})

        assert response.status_code == 400

    def test_not_authorized(self, client, calendars):
        calendars.get_range_events.side_effect = NotAuthorizedError("no token")

        assert client.get("/api/calendar").status_code == 401

    def test_fetch_failure(self, client, calendars):
        calendars.get_range_events.side_effect = CalendarFetchError("down")

        response = client.get("/api/calendar")

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch calendar data"

    def test_grid(self, client, calendars, event_factory):
        calendars.get_range_events.return_value = [event_factory("a", "2024-06-10", "2024-06-11")]

        response = client.get("/api/calendar/grid")

        assert response.status_code == 200
        data = response.json()
        assert len(data["weeks"]) == 4
        assert all(len(week) == 7 for week in data["weeks"])
        assert data["weekStart"] == 0
        assert data["lastUpdated"] is not None
        assert data["authRequired"] is False

    def test_refresh(self, client, calendars, weather, event_factory, weather_factory):
        calendars.get_range_events.return_value = [event_factory("a", "2024-06-10", "2024-06-11")]
        weather.get_entries.return_value = [weather_factory("2024-06-11")]

        response = client.post("/api/refresh")

        assert response.json() == {
            "success": True,
            "events": 1,
            "weatherDays": 1,
            "lastUpdated": response.json()["lastUpdated"],
            "error": None,
            "authRequired": False,
        }

    def test_unexpected_error_hides_details(self, client, calendars):
        calendars.get_range_events.side_effect = RuntimeError("secret detail")
        unsafe_client = TestClient(app, raise_server_exceptions=False)

        response = unsafe_client.get("/api/calendar")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


# ---------------------------------------------------------------------------
# WEATHER JSON
# ---------------------------------------------------------------------------


class TestWeatherApi:
    def test_forecast(self, client, weather, weather_factory):
        weather.get_entries.return_value = [weather_factory("2024-06-11", emoji=("☀️", "☁️"), code="101")]

        response = client.get("/api/weather")

        data = response.json()
        assert data["success"] is True
        assert data["data"][0] == {
            "date": "2024-06-11",
            "weather": "晴れ",
            "weatherCode": "101",
            "emoji": "☀️☁️",
            "precipitationProbability": "10",
            "reliability": "A",
        }

    def test_fetch_failure(self, client, weather):
        weather.get_entries.side_effect = WeatherFetchError("down")

        response = client.get("/api/weather")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "WEATHER_FETCH_ERROR"


# ---------------------------------------------------------------------------
# OAUTH
# ---------------------------------------------------------------------------


class TestAuthFlow:
    """Tests for /auth/*."""

    def test_login_redirects_to_google(self, client):
        response = client.get("/auth/login", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"].startswith("https://accounts.google.com/")

    def test_login_not_configured(self, client, credentials):
        credentials.auth_client.is_configured = False

        assert client.get("/auth/login", follow_redirects=False).status_code == 503

    def test_callback_success(self, client, credentials, refresher):
        refresher.state.auth_required = True
        client.get("/auth/login", follow_redirects=False)

        response = client.get(
            "/auth/callback", params={"code": "4/abc", "state": "state-123"}, follow_redirects=False
        )

        assert response.headers["location"] == "/"
        credentials.complete_login.assert_awaited_once_with("4/abc")
        assert refresher.state.auth_required is False

    @pytest.mark.parametrize("params,expected", [
        ({"error": "access_denied"}, "auth_denied"),
        ({"state": "state-123"}, "no_code"),
        ({"code": "4/abc", "state": "forged"}, "invalid_state"),
        ({"code": "4/abc"}, "invalid_state"),
    ])
    def test_callback_errors(self, client, params, expected):
        response = client.get("/auth/callback", params=params, follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == f"/setup?error={expected}"

    def test_state_is_single_use(self, client):
        client.get("/auth/login", follow_redirects=False)
        client.get("/auth/callback", params={"code": "4/abc", "state": "state-123"}, follow_redirects=False)

        response = client.get(
            "/auth/callback", params={"code": "4/abc", "state": "state-123"}, follow_redirects=False
        )

        assert response.headers["location"] == "/setup?error=invalid_state"

    def test_token_exchange_failure(self, client, credentials):
        credentials.complete_login.side_effect = AuthenticationError("invalid_grant")
        client.get("/auth/login", follow_redirects=False)

        response = client.get(
            "/auth/callback", params={"code": "4/abc", "state": "state-123"}, follow_redirects=False
        )

        assert response.headers["location"] == "/setup?error=token_exchange_failed"

    def test_status(self, client, credentials):
        credentials.is_authenticated.return_value = False

        assert client.get("/auth/status").json() == {"authenticated": False}

    def test_reset_requires_admin(self, client, admin_password, credentials):
        assert client.post("/auth/reset").status_code == 401

        response = client.post("/auth/reset", auth=("admin", admin_password))

        assert response.json()["success"] is True
        credentials.reset.assert_awaited_once()


# ---------------------------------------------------------------------------
# ADMIN
# ---------------------------------------------------------------------------


class TestAdminAuth:
    """Tests for HTTP Basic protection."""

    def test_password_not_configured(self, client, monkeypatch):
        from app.core.config import settings
        monkeypatch.setattr(settings, "ADMIN_PASSWORD", "")

        response = client.get("/api/config", auth=("admin", "anything"))

        assert response.status_code == 500
        assert response.json()["detail"] == "Admin password not configured"

    def test_missing_credentials(self, client, admin_password):
        response = client.get("/api/config")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == 'Basic realm="Admin Area"'
        assert response.json()["detail"] == "Authentication required"

    def test_wrong_password(self, client, admin_password):
        response = client.get("/api/config", auth=("admin", "wrong"))

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_wrong_username(self, client, admin_password):
        assert client.get("/api/config", auth=("root", admin_password)).status_code == 401


class TestAdminApi:
    """Tests for configuration, calendar list and reload endpoints."""

    def test_get_config(self, client, admin_password):
        response = client.get("/api/config", auth=("admin", admin_password))

        assert response.status_code == 200
        data = response.json()
        assert data["display"]["weekStart"] == 0
        assert data["calendars"][1]["isHoliday"] is True

    def test_save_config(self, client, admin_password, config_store):
        payload = {
            "calendars": [{"id": "work@example.com", "name": "Work", "color": "#00796b"}],
            "display": {"weekStart": 1, "language": "ja-JP", "timezone": "Asia/Tokyo"},
        }

        response = client.post("/api/config", json=payload, auth=("admin", admin_password))

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert config_store.load().display.week_start == 1

    def test_save_invalid_config(self, client, admin_password):
        response = client.post(
            "/api/config",
            json={"calendars": "nope", "display": {}},
            auth=("admin", admin_password),
        )

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid configuration format")

    def test_list_calendars(self, client, admin_password, calendars):
        calendars.list_calendars.return_value = [
            CalendarInfo(id="family@group.calendar.google.com", summary="Family", background_color="#4a90d9"),
        ]

        response = client.get("/api/calendars", auth=("admin", admin_password))

        assert response.json() == {
            "calendars": [{
                "id": "family@group.calendar.google.com",
                "summary": "Family",
                "primary": False,
                "backgroundColor": "#4a90d9",
            }]
        }

    def test_list_calendars_not_authorized(self, client, admin_password, calendars):
        calendars.list_calendars.side_effect = NotAuthorizedError("no token")

        assert client.get("/api/calendars", auth=("admin", admin_password)).status_code == 401

    def test_reload_reports_delivered_clients(self, client, admin_password, fanout):
        healthy = [AsyncMock(), AsyncMock()]
        broken = AsyncMock()
        broken.send_json.side_effect = ConnectionError("gone")
        for connection in healthy + [broken]:
            fanout.register(connection)

        response = client.post("/api/admin/reload", auth=("admin", admin_password))

        assert response.status_code == 200
        assert response.json()["totalClients"] == 2
        assert fanout.connection_count == 2


class TestAdminPage:
    """Tests for GET /admin."""

    def test_requires_credentials(self, client, admin_password):
        response = client.get("/admin")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == 'Basic realm="Admin Area"'

    def test_renders_config_and_actions(self, client, admin_password):
        response = client.get("/admin", auth=("admin", admin_password))

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "family@group.calendar.google.com" in response.text
        assert "&quot;weekStart&quot;: 0" in response.text
        for endpoint in ("/api/calendars", "/api/config", "/auth/reset", "/api/admin/reload"):
            assert endpoint in response.text

    def test_shows_refresh_state(self, client, admin_password, refresher, credentials):
        refresher.state.last_error = "カレンダーの取得に失敗しました"
        credentials.is_authenticated.return_value = False

        response = client.get("/admin", auth=("admin", admin_password))

        assert '<span class="status-error">カレンダーの取得に失敗しました</span>' in response.text
        assert "Google連携: 未連携" in response.text

    def test_broken_config_is_editable(self, client, admin_password, config_store):
        config_store.path.write_text("{broken", encoding="utf-8")

        response = client.get("/admin", auth=("admin", admin_password))

        assert response.status_code == 200
        assert "Failed to load configuration" in response.text
        assert ">{broken</textarea>" in response.text


# ---------------------------------------------------------------------------
# HEALTH
# ---------------------------------------------------------------------------


class TestStatus:
    def test_status(self, client):
        data = client.get("/api/status").json()

        assert data["status"] == "ok"
        assert data["version"] == "1.0.0"
        assert "refreshRunning" in data
