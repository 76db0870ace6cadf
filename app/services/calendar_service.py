"""
Calendar Service - fetch the events of every configured calendar.

Each configured calendar is fetched on its own; a calendar that fails is
logged and skipped so one broken share does not blank the whole display.
The merged list is sorted by start and handed to the layout engine.

Usage:
    from app.services.calendar_service import calendar_service

    events = await calendar_service.get_range_events(date(2024, 6, 9))
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo

from app.environments.base import APIError
from app.environments.google.calendar import GoogleCalendarClient
from app.environments.google.calendar.schemas import CalendarEvent, CalendarInfo
from app.schemas.calendar import Event
from app.schemas.config import DisplayConfig
from app.services.day_ordering import start_instant
from app.services.display_config import DisplayConfigStore, display_config_store
from app.services.google_credentials import GoogleCredentialManager, google_credentials


logger = logging.getLogger("wallcal.services.calendar")

UNTITLED = "(タイトルなし)"
DEFAULT_RANGE_DAYS = 28


class NotAuthorizedError(Exception):
    """No usable Google token, or Google rejected the one we have."""
    pass


class CalendarFetchError(Exception):
    """Every configured calendar failed to load."""
    pass


def to_display_event(item: CalendarEvent, calendar_id: str, color: Optional[str]) -> Optional[Event]:
    """
    Map a Calendar API event to the display's Event record.

    Returns None for events without a start.
    """
    if item.start is None or not item.start.value():
        logger.warning(f"Skipping event {item.id} without a start")
        return None

    end = item.end.value() if item.end is not None else None

    return Event(
        id=item.id,
        title=item.summary or UNTITLED,
        start=item.start.value(),
        end=end or None,
        all_day=item.is_all_day(),
        source_id=calendar_id,
        color=color,
    )


class CalendarService:
    def __init__(
        self,
        credentials: Optional[GoogleCredentialManager] = None,
        config_store: Optional[DisplayConfigStore] = None,
        client_factory: Callable[[str], GoogleCalendarClient] = GoogleCalendarClient,
    ):
        self.credentials = credentials or google_credentials
        self.config_store = config_store or display_config_store
        self.client_factory = client_factory

    async def _client(self) -> GoogleCalendarClient:
        access_token = await self.credentials.get_access_token()
        if access_token is None:
            raise NotAuthorizedError("Not authenticated with Google")
        return self.client_factory(access_token)

    async def list_calendars(self) -> List[CalendarInfo]:
        """
        Calendars available to the connected account.

        Raises:
            NotAuthorizedError: Without a usable token or on a 401
            CalendarFetchError: On any other API failure
        """
        client = await self._client()
        try:
            return await client.list_calendars()
        except APIError as e:
            if e.is_unauthorized:
                raise NotAuthorizedError(str(e))
            logger.error(f"Error fetching calendar list: {e}")
            raise CalendarFetchError("Failed to fetch calendar list")

    async def get_range_events(
        self,
        start: date,
        days: int = DEFAULT_RANGE_DAYS,
        config: Optional[DisplayConfig] = None,
    ) -> List[Event]:
        """
        Fetch events of all configured calendars for [start, start + days).

        Args:
            start: First local day of the range
            days: Range length in days
            config: Display config (loaded from the store when omitted)

        Raises:
            NotAuthorizedError: Without a usable token or on a 401
            CalendarFetchError: When every configured calendar fails
        """
        config = config or self.config_store.load()
        tz = ZoneInfo(config.display.timezone)

        if isinstance(start, datetime):
            start = start.date()
        time_min = datetime.combine(start, time.min, tzinfo=tz)
        time_max = time_min + timedelta(days=days)

        client = await self._client()

        events: List[Event] = []
        failures = 0

        for source in config.calendars:
            try:
                items = await client.list_events(
                    source.id,
                    time_min=time_min,
                    time_max=time_max,
                    time_zone=config.display.timezone,
                )
            except APIError as e:
                if e.is_unauthorized:
                    raise NotAuthorizedError(str(e))
                logger.error(f"Error fetching events from calendar {source.id}: {e}")
                failures += 1
                continue

            mapped = [to_display_event(item, source.id, source.color) for item in items]
            events.extend(event for event in mapped if event is not None)
            logger.info(f"Fetched {len(items)} events from calendar: {source.name}")

        if config.calendars and failures == len(config.calendars):
            raise CalendarFetchError("Failed to fetch calendar events")

        events.sort(key=lambda event: start_instant(event, tz))
        return events


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
calendar_service = CalendarService()
