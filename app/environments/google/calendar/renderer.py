"""
Calendar HTML Renderer - Generate the kiosk page for the wall display.

This module turns the computed grid (weeks of DayCell) into a complete
HTML page optimized for Chromium in kiosk mode.

Page Layout:
============
    ┌──────────────────────────────────────────────┐
    │ 2024年 (令和6年)  6月10日 (月)   09:41  更新 09:40 │
    ├──────┬──────┬──────┬──────┬──────┬──────┬──────┤
    │  日  │  月  │  火  │  水  │  木  │  金  │  土  │
    ├──────┼──────┼──────┼──────┼──────┼──────┼──────┤
    │ 9 ☀️ │ 10   │ ...                               │
    │ ████ multi-day bar ████████                     │
    │ 10:00 Meeting                                   │
    └─────────────────────────────────────────────────┘

The grid is plain HTML/CSS. A small script keeps the clock ticking and
listens on the Server-Sent Events endpoint: a "reload" message reloads the
page, and a dropped stream is retried after the configured delay.

Usage:
======
    renderer = CalendarRenderer()
    html = renderer.render_grid(weeks, today=today, now=now)
"""

import html as html_escape
import json
from datetime import date, datetime, tzinfo
from typing import List, Optional, Tuple

from app.services.calendar_grid import weekday_labels
from app.services.calendar_layout import DayCell
from app.services.day_ordering import DayEventView


WEEKDAY_NAMES = ["日", "月", "火", "水", "木", "金", "土"]

# Messages shown on /setup for the ?error= codes set by the OAuth callback.
SETUP_ERROR_MESSAGES = {
    "auth_denied": "認証がキャンセルされました",
    "no_code": "認証コードが取得できませんでした",
    "token_exchange_failed": "トークンの取得に失敗しました",
    "invalid_state": "認証リクエストが無効です。もう一度お試しください",
}
DEFAULT_SETUP_ERROR = "認証エラーが発生しました"


def japanese_era(year: int) -> Tuple[str, int]:
    """
    Era name and era year for a Gregorian year.

    Returns ("", 0) for years before Showa.
    """
    if year >= 2019:
        return "令和", year - 2018
    if year >= 1989:
        return "平成", year - 1988
    if year >= 1926:
        return "昭和", year - 1925
    return "", 0


def setup_error_message(code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    return SETUP_ERROR_MESSAGES.get(code, DEFAULT_SETUP_ERROR)


class CalendarRenderer:
    """
    Renders the calendar grid as HTML for display.

    Attributes:
        tz: Display timezone, used for event time labels
        reconnect_ms: Delay before the page reopens a dropped event stream
        font_size: Base font size in pixels
    """

    def __init__(
        self,
        tz: Optional[tzinfo] = None,
        reconnect_ms: int = 5000,
        font_size: int = 16,
    ):
        self.tz = tz
        self.reconnect_ms = reconnect_ms
        self.font_size = font_size

    def _get_css(self) -> str:
        """Generate CSS styles for the grid page."""
        return f"""
        * {{
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }}

        body {{
            font-family: 'Hiragino Sans', 'Noto Sans JP', -apple-system, sans-serif;
            font-size: {self.font_size}px;
            background-color: #fafafa;
            color: #222;
            height: 100vh;
            overflow: hidden;
        }}

        .calendar-container {{
            display: flex;
            flex-direction: column;
            height: 100vh;
            padding: 0.5rem;
        }}

        .calendar-header {{
            display: flex;
            justify-content: space-between;
            align-items: baseline;
            padding: 0.25rem 0.5rem 0.5rem;
        }}

        .date-part {{ font-size: 1.6rem; font-weight: 600; }}
        .era {{ font-size: 1rem; color: #666; margin: 0 0.5rem; }}
        .time-part {{ font-size: 1.6rem; font-variant-numeric: tabular-nums; }}
        .last-update {{ font-size: 0.8rem; color: #888; margin-left: 1rem; }}

        .error {{
            background: #fdecea;
            color: #b71c1c;
            padding: 0.5rem 1rem;
            border-radius: 6px;
            margin-bottom: 0.5rem;
            display: flex;
            justify-content: space-between;
            align-items: center;
        }}

        .retry-button {{
            border: none;
            background: #b71c1c;
            color: white;
            padding: 0.3rem 0.8rem;
            border-radius: 4px;
            font-size: 0.9rem;
        }}

        .calendar-grid {{
            flex: 1;
            display: flex;
            flex-direction: column;
            border: 1px solid #ddd;
        }}

        .weekday-header, .week {{
            display: grid;
            grid-template-columns: repeat(7, 1fr);
        }}

        .week {{ flex: 1; min-height: 0; }}

        .weekday {{
            text-align: center;
            font-weight: 600;
            padding: 0.25rem 0;
            border-bottom: 1px solid #ddd;
        }}

        .weekday.sunday, .day.sunday .day-number {{ color: #d32f2f; }}
        .weekday.saturday, .day.saturday .day-number {{ color: #1976d2; }}

        .day {{
            border-right: 1px solid #eee;
            border-bottom: 1px solid #eee;
            display: flex;
            flex-direction: column;
            overflow: hidden;
        }}

        .day.today {{ background: #fff8e1; }}
        .day.today .day-number {{ font-weight: 700; text-decoration: underline; }}

        .day-header {{
            display: flex;
            justify-content: space-between;
            padding: 0.1rem 0.3rem;
        }}

        .day-events {{
            display: flex;
            flex-direction: column;
            gap: 2px;
        }}

        .event {{
            color: white;
            font-size: 0.8rem;
            padding: 1px 4px;
            margin: 0 3px;
            border-radius: 3px;
            white-space: nowrap;
            overflow: hidden;
            text-overflow: ellipsis;
            min-height: 1.2em;
        }}

        .event.multi-day-start {{ margin-right: 0; border-radius: 3px 0 0 3px; }}
        .event.multi-day-middle {{ margin: 0; border-radius: 0; }}
        .event.multi-day-end {{ margin-left: 0; border-radius: 0 3px 3px 0; }}

        .event-time {{ margin-right: 0.3em; font-variant-numeric: tabular-nums; }}

        .admin-link {{
            text-align: right;
            font-size: 0.7rem;
            color: #aaa;
            padding-top: 0.25rem;
        }}
        """

    # -------------------------------------------------------------------------
    # GRID PIECES
    # -------------------------------------------------------------------------

    def _format_time(self, view: DayEventView) -> str:
        start = view.event.start
        if not isinstance(start, datetime):
            return ""
        if self.tz is not None and start.tzinfo is not None:
            start = start.astimezone(self.tz)
        return start.strftime("%H:%M")

    def _render_event(self, view: DayEventView) -> str:
        """Render one event bar inside a day cell."""
        classes = ["event"]
        if view.is_multi_day:
            classes.append("multi-day")
            classes.append(view.continuation_class)

        style = f"order: {view.lane_key};"
        if view.event.color:
            style = f"background-color: {html_escape.escape(view.event.color)}; {style}"

        parts = []
        if view.show_time:
            parts.append(f'<span class="event-time">{self._format_time(view)}</span>')
        if view.show_title:
            parts.append(
                f'<span class="event-title">{html_escape.escape(view.event.title)}</span>'
            )

        return (
            f'<div class="{" ".join(classes)}" style="{style}" '
            f'data-event-id="{html_escape.escape(view.event.id)}">'
            f'{"".join(parts)}</div>'
        )

    def _day_classes(self, cell: DayCell) -> str:
        classes = ["day"]
        if cell.day.is_sunday or cell.is_holiday:
            classes.append("sunday")
        if cell.day.is_saturday:
            classes.append("saturday")
        if cell.is_holiday:
            classes.append("holiday")
        if cell.is_today:
            classes.append("today")
        return " ".join(classes)

    def _render_day(self, cell: DayCell) -> str:
        weather_html = ""
        if cell.weather is not None:
            title = html_escape.escape(cell.weather.weather or "")
            weather_html = (
                f'<span class="day-weather" title="{title}">'
                f'{html_escape.escape(cell.weather.emoji_text)}</span>'
            )

        events_html = "".join(self._render_event(view) for view in cell.events)

        return f"""
            <div class="{self._day_classes(cell)}" data-date="{cell.day.date_key}">
                <div class="day-header">
                    <span class="day-number">{cell.day.date.day}</span>
                    {weather_html}
                </div>
                <div class="day-events">{events_html}</div>
            </div>"""

    def _render_header(
        self,
        today: date,
        now: Optional[datetime],
        last_updated: Optional[datetime],
    ) -> str:
        era, era_year = japanese_era(today.year)
        era_html = f'<span class="era">({era}{era_year}年)</span>' if era else ""
        weekday = WEEKDAY_NAMES[(today.weekday() + 1) % 7]

        clock = now.strftime("%H:%M:%S") if now else ""

        if last_updated is not None:
            if self.tz is not None and last_updated.tzinfo is not None:
                last_updated = last_updated.astimezone(self.tz)
            update_html = f'<span class="last-update">更新 {last_updated.strftime("%H:%M")}</span>'
        else:
            update_html = '<span class="last-update">読み込み中...</span>'

        return f"""
        <header class="calendar-header">
            <div class="date-part">
                <span class="year-part">{today.year}年</span>{era_html}
                <span class="month-day">{today.month}月{today.day}日</span>
                <span class="day-of-week">({weekday})</span>
            </div>
            <div>
                <span class="time-part" id="clock">{clock}</span>
                {update_html}
            </div>
        </header>"""

    def _render_script(self) -> str:
        """Clock tick plus the live-reload listener."""
        return f"""
    <script>
    (function () {{
        var RECONNECT_MS = {json.dumps(self.reconnect_ms)};
        var clock = document.getElementById('clock');
        function pad(n) {{ return n < 10 ? '0' + n : '' + n; }}
        setInterval(function () {{
            var d = new Date();
            if (clock) {{
                clock.textContent = pad(d.getHours()) + ':' + pad(d.getMinutes()) + ':' + pad(d.getSeconds());
            }}
        }}, 1000);

        var source = null;
        function connect() {{
            if (source) {{ source.close(); }}
            source = new EventSource('/api/sse/events');
            source.onmessage = function (event) {{
                try {{
                    var data = JSON.parse(event.data);
                    if (data.type === 'reload') {{ window.location.reload(); }}
                }} catch (e) {{
                    console.error('Failed to parse SSE message', e);
                }}
            }};
            source.onerror = function () {{
                source.close();
                setTimeout(connect, RECONNECT_MS);
            }};
        }}
        connect();

        var retry = document.getElementById('retry');
        if (retry) {{
            retry.addEventListener('click', function () {{
                fetch('/api/refresh', {{ method: 'POST' }}).then(function () {{
                    window.location.reload();
                }});
            }});
        }}
    }})();
    </script>"""

    # -------------------------------------------------------------------------
    # PAGES
    # -------------------------------------------------------------------------

    def render_grid(
        self,
        weeks: List[List[DayCell]],
        today: date,
        now: Optional[datetime] = None,
        last_updated: Optional[datetime] = None,
        error: Optional[str] = None,
        week_start: int = 0,
        title: str = "Calendar",
        admin_url: Optional[str] = None,
    ) -> str:
        """
        Render the full calendar grid page.

        Args:
            weeks: Output of build_calendar_view
            today: Date shown in the header
            now: Current local time for the initial clock value
            last_updated: Time of the last successful refresh
            error: Message of the last failed refresh, shown with a retry button
            week_start: Calendar weekday of the first column (Sunday=0)
            title: Document title
            admin_url: Optional URL shown in the footer

        Returns:
            Complete HTML page as a string
        """
        header_cells = []
        for index, label in enumerate(weekday_labels(week_start)):
            weekday = (week_start + index) % 7
            css = "weekday"
            if weekday == 0:
                css += " sunday"
            elif weekday == 6:
                css += " saturday"
            header_cells.append(f'<div class="{css}">{label}</div>')

        weeks_html = "".join(
            f'<div class="week">{"".join(self._render_day(cell) for cell in week)}</div>'
            for week in weeks
        )

        error_html = ""
        if error:
            error_html = f"""
        <div class="error">
            <span>{html_escape.escape(error)}</span>
            <button class="retry-button" id="retry">再試行</button>
        </div>"""

        admin_html = ""
        if admin_url:
            admin_html = (
                f'<div class="admin-link"><span class="admin-text">'
                f'{html_escape.escape(admin_url)}</span></div>'
            )

        return f"""<!DOCTYPE html>
<html lang="ja">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html_escape.escape(title)}</title>
    <style>
    {self._get_css()}
    </style>
</head>
<body>
    <div class="calendar-container">
        {self._render_header(today, now, last_updated)}
        {error_html}
        <div class="calendar-grid">
            <div class="weekday-header">{"".join(header_cells)}</div>
            {weeks_html}
        </div>
        {admin_html}
    </div>
    {self._render_script()}
</body>
</html>
"""

    def render_setup(
        self,
        authenticated: bool,
        error_code: Optional[str] = None,
        title: str = "Calendar Setup",
    ) -> str:
        """
        Render the Google account connection page.

        Args:
            authenticated: Whether a usable token is already stored
            error_code: The ?error= value from the OAuth callback redirect
        """
        message = setup_error_message(error_code)
        error_html = (
            f'<p class="error-message">{html_escape.escape(message)}</p>' if message else ""
        )

        if authenticated:
            body = """
            <p>Googleカレンダーと連携済みです。</p>
            <a class="button" href="/">カレンダーを表示</a>"""
        else:
            body = """
            <p>Googleカレンダーと連携してください。</p>
            <a class="button" href="/auth/login">Googleアカウントで認証</a>
            <p class="note">読み取り専用の権限のみを要求します。</p>"""

        return f"""<!DOCTYPE html>
<html lang="ja">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html_escape.escape(title)}</title>
    <style>
    body {{
        font-family: 'Hiragino Sans', 'Noto Sans JP', -apple-system, sans-serif;
        display: flex;
        align-items: center;
        justify-content: center;
        min-height: 100vh;
        background: #f5f5f5;
    }}
    .setup-card {{
        background: white;
        padding: 2rem 3rem;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        text-align: center;
    }}
    .button {{
        display: inline-block;
        margin-top: 1rem;
        padding: 0.6rem 1.4rem;
        background: #1976d2;
        color: white;
        border-radius: 6px;
        text-decoration: none;
    }}
    .note {{ color: #888; font-size: 0.8rem; margin-top: 0.75rem; }}
    .error-message {{ color: #d32f2f; margin-top: 1rem; }}
    </style>
</head>
<body>
    <div class="setup-card">
        <h1>{html_escape.escape(title)}</h1>
        {body}
        {error_html}
    </div>
</body>
</html>
"""

    def render_admin(
        self,
        config_json: str,
        authenticated: bool,
        last_updated: Optional[datetime] = None,
        last_error: Optional[str] = None,
        config_error: Optional[str] = None,
        title: str = "Calendar Admin",
    ) -> str:
        """
        Render the admin page.

        The page is served behind HTTP Basic auth, so its own requests to
        the admin API reuse the browser's credentials.

        Args:
            config_json: Current configuration, pretty-printed
            authenticated: Whether a Google account is connected
            last_updated: Time of the last successful refresh
            last_error: Message of the last failed refresh
            config_error: Why the stored configuration could not be read
        """
        if last_error:
            status_html = f'<span class="status-error">{html_escape.escape(last_error)}</span>'
        else:
            status_html = '<span class="status-ok">正常</span>'

        if last_updated is not None:
            if self.tz is not None and last_updated.tzinfo is not None:
                last_updated = last_updated.astimezone(self.tz)
            updated_text = last_updated.strftime("%Y-%m-%d %H:%M")
        else:
            updated_text = "-"

        account_text = "連携済み" if authenticated else "未連携"
        config_error_html = (
            f'<div class="error-message">{html_escape.escape(config_error)}</div>'
            if config_error else ""
        )

        return f"""<!DOCTYPE html>
<html lang="ja">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html_escape.escape(title)}</title>
    <style>
    body {{
        font-family: 'Hiragino Sans', 'Noto Sans JP', -apple-system, sans-serif;
        background: #f5f5f5;
        color: #222;
        margin: 0;
    }}
    .admin-container {{ max-width: 960px; margin: 0 auto; padding: 1.5rem; }}
    .admin-header {{ display: flex; justify-content: space-between; align-items: center; }}
    section {{
        background: white;
        border-radius: 8px;
        box-shadow: 0 1px 4px rgba(0, 0, 0, 0.1);
        padding: 1rem 1.5rem;
        margin-top: 1rem;
    }}
    button {{
        border: none;
        border-radius: 4px;
        padding: 0.5rem 1rem;
        color: white;
        background: #1976d2;
        cursor: pointer;
    }}
    button:disabled {{ opacity: 0.5; cursor: default; }}
    .reset-button {{ background: #d32f2f; }}
    .reload-all-button {{ background: #388e3c; }}
    .json-editor {{
        width: 100%;
        min-height: 320px;
        font-family: monospace;
        font-size: 0.9rem;
        box-sizing: border-box;
    }}
    .json-editor.error {{ border: 2px solid #d32f2f; }}
    .button-group {{ display: flex; gap: 0.5rem; margin-top: 0.5rem; }}
    .calendar-list table {{ width: 100%; border-collapse: collapse; margin-top: 0.5rem; }}
    .calendar-list td, .calendar-list th {{ text-align: left; padding: 0.3rem; border-bottom: 1px solid #eee; }}
    .calendar-id {{ font-family: monospace; font-size: 0.8rem; }}
    .color-sample {{ display: inline-block; width: 1em; height: 1em; border-radius: 2px; vertical-align: middle; margin-right: 0.3em; }}
    .status-ok {{ color: #388e3c; }}
    .status-error, .error-message {{ color: #d32f2f; }}
    .message {{ position: fixed; bottom: 1rem; right: 1rem; padding: 0.75rem 1rem; border-radius: 6px; color: white; }}
    .message.success-message {{ background: #388e3c; }}
    .message.error-message {{ background: #d32f2f; color: white; }}
    </style>
</head>
<body>
    <div class="admin-container">
        <div class="admin-header">
            <h1>{html_escape.escape(title)}</h1>
            <a href="/">カレンダーに戻る</a>
        </div>

        <section class="calendar-list-section">
            <h2>カレンダー一覧</h2>
            <button class="refresh-button" id="load-calendars">カレンダーリストを更新</button>
            <div class="calendar-list" id="calendar-list"></div>
        </section>

        <section class="config-section">
            <h2>設定</h2>
            {config_error_html}
            <textarea class="json-editor" id="config-json" spellcheck="false">{html_escape.escape(config_json)}</textarea>
            <div class="error-message" id="json-error"></div>
            <div class="button-group">
                <button class="save-button" id="save-config">保存</button>
                <button class="reset-button" id="reset-auth">Google認証をリセット</button>
            </div>
        </section>

        <section class="remote-control-section">
            <h2>リモート操作</h2>
            <button class="reload-all-button" id="reload-all">すべてのクライアントをリロード</button>
            <p class="control-description">接続中のすべての表示画面を再読み込みします。</p>
        </section>

        <section class="status-section">
            <h3>システム状態</h3>
            <p>状態: {status_html}</p>
            <p>Google連携: {account_text}</p>
            <p>最終更新: {updated_text}</p>
        </section>
    </div>
    <div class="message" id="message" hidden></div>
    {self._render_admin_script()}
</body>
</html>
"""

    def _render_admin_script(self) -> str:
        """Admin page actions against the JSON API."""
        return """
    <script>
    (function () {
        var messageBox = document.getElementById('message');
        var editor = document.getElementById('config-json');
        var jsonError = document.getElementById('json-error');
        var saveButton = document.getElementById('save-config');

        function showMessage(text, type) {
            messageBox.textContent = text;
            messageBox.className = 'message ' + (type === 'success' ? 'success-message' : 'error-message');
            messageBox.hidden = false;
            setTimeout(function () { messageBox.hidden = true; }, 5000);
        }

        function escapeText(value) {
            var span = document.createElement('span');
            span.textContent = value == null ? '' : String(value);
            return span.innerHTML;
        }

        editor.addEventListener('input', function () {
            try {
                if (editor.value.trim()) { JSON.parse(editor.value); }
                jsonError.textContent = '';
                editor.classList.remove('error');
                saveButton.disabled = false;
            } catch (e) {
                jsonError.textContent = 'JSONフォーマットが正しくありません';
                editor.classList.add('error');
                saveButton.disabled = true;
            }
        });

        document.getElementById('load-calendars').addEventListener('click', function () {
            var button = this;
            button.disabled = true;
            fetch('/api/calendars').then(function (response) {
                if (!response.ok) { throw new Error(response.status); }
                return response.json();
            }).then(function (data) {
                var rows = data.calendars.map(function (cal) {
                    var color = escapeText(cal.backgroundColor || '');
                    return '<tr><td>' + escapeText(cal.summary) + '</td>' +
                        '<td class="calendar-id">' + escapeText(cal.id) + '</td>' +
                        '<td><span class="color-sample" style="background-color: ' + color + '"></span>' + color + '</td></tr>';
                });
                document.getElementById('calendar-list').innerHTML = rows.length
                    ? '<table><thead><tr><th>名前</th><th>ID</th><th>色</th></tr></thead><tbody>' + rows.join('') + '</tbody></table>'
                    : '<p class="no-calendars">カレンダーがありません</p>';
                showMessage('カレンダーリストを取得しました', 'success');
            }).catch(function () {
                showMessage('カレンダーリストの取得に失敗しました', 'error');
            }).finally(function () {
                button.disabled = false;
            });
        });

        saveButton.addEventListener('click', function () {
            var payload;
            try {
                payload = JSON.parse(editor.value);
            } catch (e) {
                showMessage('JSONフォーマットが正しくありません', 'error');
                return;
            }
            saveButton.disabled = true;
            fetch('/api/config', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(payload)
            }).then(function (response) {
                if (!response.ok) { throw new Error(response.status); }
                showMessage('設定を保存しました', 'success');
            }).catch(function () {
                showMessage('設定の保存に失敗しました', 'error');
            }).finally(function () {
                saveButton.disabled = false;
            });
        });

        document.getElementById('reset-auth').addEventListener('click', function () {
            if (!confirm('Google認証情報をリセットしますか？\\n再度認証が必要になります。')) { return; }
            fetch('/auth/reset', { method: 'POST' }).then(function (response) {
                if (!response.ok) { throw new Error(response.status); }
                showMessage('認証情報をリセットしました', 'success');
                setTimeout(function () { window.location.href = '/setup'; }, 2000);
            }).catch(function () {
                showMessage('リセットに失敗しました', 'error');
            });
        });

        document.getElementById('reload-all').addEventListener('click', function () {
            if (!confirm('すべてのクライアント画面をリロードしますか？')) { return; }
            var button = this;
            button.disabled = true;
            fetch('/api/admin/reload', { method: 'POST' }).then(function (response) {
                if (!response.ok) { throw new Error(response.status); }
                return response.json();
            }).then(function (data) {
                showMessage(data.message + ' (接続数: ' + data.totalClients + ')', 'success');
            }).catch(function () {
                showMessage('リロードコマンドの送信に失敗しました', 'error');
            }).finally(function () {
                button.disabled = false;
            });
        });
    })();
    </script>"""

    def render_error(
        self,
        error_message: str,
        title: str = "Calendar Error",
    ) -> str:
        """
        Render an error page.

        Used when the grid cannot be built at all (e.g., broken config file).
        """
        safe_message = html_escape.escape(error_message)

        return f"""<!DOCTYPE html>
<html lang="ja">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta http-equiv="refresh" content="60">
    <title>{html_escape.escape(title)}</title>
    <style>
    body {{
        font-family: 'Hiragino Sans', 'Noto Sans JP', -apple-system, sans-serif;
        text-align: center;
        padding: 4rem 2rem;
    }}
    .error-icon {{
        font-size: 4rem;
        margin-bottom: 1rem;
    }}
    .error-message {{
        color: #ef5350;
        font-size: 1.2rem;
        margin-bottom: 1rem;
    }}
    .error-hint {{
        color: #8a8a9a;
        font-size: 0.9rem;
    }}
    </style>
</head>
<body>
    <div class="error-icon">⚠️</div>
    <h1>{html_escape.escape(title)}</h1>
    <p class="error-message">{safe_message}</p>
    <p class="error-hint">60秒後に自動的に再読み込みします。</p>
</body>
</html>
"""
