"""
Tests for the HTML renderer.

These tests verify:
- Japanese era calculation
- Day and event classes in the grid
- Escaping of event titles
- Error banner, setup and error pages
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from app.environments.google.calendar import CalendarRenderer
from app.environments.google.calendar.renderer import japanese_era, setup_error_message
from app.services.calendar_layout import build_calendar_view

TOKYO = ZoneInfo("Asia/Tokyo")
HOLIDAYS = "ja.japanese#holiday@group.v.calendar.google.com"


def _render(events=(), weather=(), **kwargs):
    weeks = build_calendar_view(list(events), list(weather), anchor=date(2024, 6, 12), tz=TOKYO)
    renderer = CalendarRenderer(tz=TOKYO)
    return renderer.render_grid(weeks, today=date(2024, 6, 12), **kwargs)


class TestJapaneseEra:
    def test_reiwa(self):
        assert japanese_era(2024) == ("令和", 6)
        assert japanese_era(2019) == ("令和", 1)

    def test_heisei(self):
        assert japanese_era(2018) == ("平成", 30)
        assert japanese_era(1989) == ("平成", 1)

    def test_showa(self):
        assert japanese_era(1988) == ("昭和", 63)

    def test_before_showa(self):
        assert japanese_era(1900) == ("", 0)


class TestSetupErrorMessage:
    def test_known_code(self):
        assert setup_error_message("auth_denied") == "認証がキャンセルされました"

    def test_unknown_code(self):
        assert setup_error_message("weird") == "認証エラーが発生しました"

    def test_no_code(self):
        assert setup_error_message(None) is None


class TestRenderGrid:
    """Tests for the display page."""

    def test_header(self):
        page = _render(now=datetime(2024, 6, 12, 9, 5, 7, tzinfo=TOKYO))

        assert "2024年" in page
        assert "令和6年" in page
        assert "6月12日" in page
        assert "(水)" in page
        assert "09:05:07" in page
        assert "読み込み中..." in page

    def test_last_update_in_display_timezone(self):
        page = _render(last_updated=datetime(2024, 6, 12, 0, 30, tzinfo=timezone.utc))

        assert "更新 09:30" in page

    def test_day_cells(self):
        page = _render()

        assert page.count('data-date="') == 28
        assert 'class="day sunday" data-date="2024-06-09"' in page
        assert 'class="day saturday" data-date="2024-06-15"' in page
        assert 'class="day today" data-date="2024-06-12"' in page

    def test_holiday_cell(self, event_factory):
        page = _render([event_factory("h", "2024-06-17", "2024-06-18", source_id=HOLIDAYS)])

        assert 'class="day sunday holiday" data-date="2024-06-17"' in page

    def test_multi_day_bar(self, event_factory):
        page = _render([event_factory("trip", "2024-06-10", "2024-06-13", title="旅行")])

        assert "event multi-day multi-day-start" in page
        assert "event multi-day multi-day-middle" in page
        assert "event multi-day multi-day-end" in page
        assert page.count("旅行") == 1

    def test_timed_event(self, event_factory):
        page = _render([event_factory("m", "2024-06-12T00:00:00+00:00", "2024-06-12T01:00:00+00:00")])

        assert '<span class="event-time">09:00</span>' in page

    def test_title_is_escaped(self, event_factory):
        page = _render([event_factory("x", "2024-06-12", "2024-06-13", title="<script>alert(1)</script>")])

        assert "<script>alert(1)</script>" not in page
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in page

    def test_weather_glyphs(self, weather_factory):
        page = _render(weather=[weather_factory("2024-06-12", emoji=("☀️", "☁️"))])

        assert '<span class="day-weather" title="晴れ">☀️☁️</span>' in page

    def test_error_banner_with_retry(self):
        page = _render(error="カレンダーの取得に失敗しました")

        assert "カレンダーの取得に失敗しました" in page
        assert 'id="retry"' in page
        assert "再試行" in page

    def test_no_error_banner(self):
        assert 'id="retry"' not in _render()

    def test_admin_link(self):
        page = _render(admin_url="http://wallcal.local/admin")

        assert '<span class="admin-text">http://wallcal.local/admin</span>' in page

    def test_no_admin_link(self):
        assert "admin-text" not in _render().split("</style>")[1]

    def test_live_reload_script(self):
        page = _render()

        assert "/api/sse/events" in page
        assert "RECONNECT_MS = 5000" in page

    def test_monday_header(self):
        weeks = build_calendar_view([], [], anchor=date(2024, 6, 12), week_start=1, tz=TOKYO)
        page = CalendarRenderer(tz=TOKYO).render_grid(weeks, today=date(2024, 6, 12), week_start=1)

        assert page.index(">月<") < page.index(">日<")


class TestSetupAdminAndErrorPages:
    def test_setup_not_connected(self):
        page = CalendarRenderer().render_setup(authenticated=False)

        assert 'href="/auth/login"' in page

    def test_setup_connected(self):
        page = CalendarRenderer().render_setup(authenticated=True)

        assert 'href="/"' in page
        assert 'href="/auth/login"' not in page

    def test_setup_error(self):
        page = CalendarRenderer().render_setup(authenticated=False, error_code="invalid_state")

        assert "認証リクエストが無効です" in page

    def test_error_page_escapes_message(self):
        page = CalendarRenderer().render_error("<b>broken</b>")

        assert "&lt;b&gt;broken&lt;/b&gt;" in page

    def test_admin_page_escapes_config(self):
        page = CalendarRenderer().render_admin(
            config_json='{"calendars": [{"name": "<b>Work</b>"}]}',
            authenticated=True,
        )

        assert "&lt;b&gt;Work&lt;/b&gt;" in page
        assert '<span class="status-ok">正常</span>' in page
        assert "Google連携: 連携済み" in page
        assert "最終更新: -" in page

    def test_admin_page_last_update_in_display_timezone(self):
        page = CalendarRenderer(tz=TOKYO).render_admin(
            config_json="{}",
            authenticated=True,
            last_updated=datetime(2024, 6, 12, 0, 30, tzinfo=timezone.utc),
        )

        assert "最終更新: 2024-06-12 09:30" in page

    def test_admin_page_config_error(self):
        page = CalendarRenderer().render_admin(
            config_json="{broken",
            authenticated=False,
            config_error="Failed to load configuration",
        )

        assert '<div class="error-message">Failed to load configuration</div>' in page
