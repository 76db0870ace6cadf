"""
Refresh Service - keeps the display state current.

A background task refreshes events and weather every
REFRESH_INTERVAL_SECONDS. Each refresh replaces the stored lists wholesale;
the layout engine only ever reads a complete snapshot.

Failure handling:
- NotAuthorizedError: auth_required is set so "/" can send the admin to /setup
- Any other fetch error: the last good data is kept and the message is
  recorded in last_error (shown on the display with a retry button)

When the refreshed data differs from what was shown, or the local date has
moved on since the last refresh, open displays are told to reload through
the fanout.

Usage:
    from app.services.refresh_service import refresh_service

    await refresh_service.refresh()
    refresh_service.state.events
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.schemas.calendar import Event, WeatherEntry
from app.services.calendar_grid import week_start_for
from app.services.calendar_service import (
    CalendarFetchError,
    CalendarService,
    NotAuthorizedError,
    calendar_service,
)
from app.services.display_config import ConfigError, DisplayConfigStore, display_config_store
from app.services.reload_fanout import ReloadFanout, reload_fanout
from app.services.weather_service import WeatherFetchError, WeatherService, weather_service


logger = logging.getLogger("wallcal.services.refresh")

CALENDAR_ERROR_MESSAGE = "カレンダーの取得に失敗しました"
WEATHER_ERROR_MESSAGE = "天気予報データの取得に失敗しました"


@dataclass
class DisplayState:
    """Latest data shown on the display."""
    events: List[Event] = field(default_factory=list)
    weather: List[WeatherEntry] = field(default_factory=list)
    last_updated: Optional[datetime] = None
    last_error: Optional[str] = None
    auth_required: bool = False
    # Local date the last refresh anchored the grid on
    anchor_date: Optional[date] = None


class RefreshService:
    def __init__(
        self,
        calendars: Optional[CalendarService] = None,
        weather: Optional[WeatherService] = None,
        config_store: Optional[DisplayConfigStore] = None,
        fanout: Optional[ReloadFanout] = None,
        interval_seconds: Optional[float] = None,
    ):
        self.calendars = calendars or calendar_service
        self.weather = weather or weather_service
        self.config_store = config_store or display_config_store
        self.fanout = fanout or reload_fanout
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None else settings.REFRESH_INTERVAL_SECONDS
        )
        self.state = DisplayState()
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None

    def range_start(self, today: date, week_start: int) -> date:
        """First day of the grid that contains `today`."""
        return week_start_for(today, week_start)

    async def refresh(self, today: Optional[date] = None, notify: bool = True) -> DisplayState:
        """
        Fetch events and weather concurrently and update the state.

        Concurrent callers wait for the refresh in flight rather than
        starting a second one.

        Args:
            today: Local date the grid is anchored on (defaults to now)
            notify: Broadcast a reload when the data changed

        Returns:
            The updated state
        """
        async with self._lock:
            try:
                config = self.config_store.load()
            except ConfigError as e:
                self.state.last_error = str(e)
                logger.error(f"Refresh skipped: {e}")
                return self.state

            tz = ZoneInfo(config.display.timezone)
            today = today or datetime.now(tz).date()
            start = self.range_start(today, config.display.week_start)
            days = settings.WEEK_COUNT * 7

            events_result, weather_result = await asyncio.gather(
                self.calendars.get_range_events(start, days=days, config=config),
                self.weather.get_entries(),
                return_exceptions=True,
            )

            # A new local day moves the header date and the today highlight
            changed = self.state.anchor_date is not None and self.state.anchor_date != today
            self.state.anchor_date = today
            errors = []

            if isinstance(events_result, NotAuthorizedError):
                logger.warning(f"Calendar refresh needs authorization: {events_result}")
                self.state.auth_required = True
                errors.append(CALENDAR_ERROR_MESSAGE)
            elif isinstance(events_result, CalendarFetchError):
                logger.error(f"Calendar refresh failed: {events_result}")
                errors.append(CALENDAR_ERROR_MESSAGE)
            elif isinstance(events_result, BaseException):
                raise events_result
            else:
                self.state.auth_required = False
                changed = changed or events_result != self.state.events
                self.state.events = events_result

            if isinstance(weather_result, WeatherFetchError):
                logger.error(f"Weather refresh failed: {weather_result}")
                errors.append(WEATHER_ERROR_MESSAGE)
            elif isinstance(weather_result, BaseException):
                raise weather_result
            else:
                changed = changed or weather_result != self.state.weather
                self.state.weather = weather_result

            self.state.last_error = " / ".join(errors) or None
            if len(errors) < 2:
                self.state.last_updated = datetime.now(timezone.utc)

            logger.info(
                f"Refreshed {len(self.state.events)} events and "
                f"{len(self.state.weather)} weather days (changed={changed})"
            )

        if changed and notify:
            await self.fanout.broadcast_reload()

        return self.state

    # -------------------------------------------------------------------------
    # BACKGROUND LOOP
    # -------------------------------------------------------------------------

    async def _run(self) -> None:
        while True:
            try:
                await self.refresh()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception(f"Unexpected error during refresh: {e}")
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        """Start the periodic refresh task (no-op if already running)."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())
            logger.info(f"Refresh loop started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Refresh loop stopped")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
refresh_service = RefreshService()
