"""
Google Calendar API Client - Fetch calendar events for the display.

Key Features:
=============
1. List events of one calendar within a time range (recurrences expanded)
2. List available calendars for the admin picker
3. Clean error handling with APIError (401 kept distinct for re-auth)

API Reference:
==============
- Events API: https://developers.google.com/calendar/api/v3/reference/events
- CalendarList API: https://developers.google.com/calendar/api/v3/reference/calendarList

Usage Example:
==============
    client = GoogleCalendarClient(access_token="ya29.xxx")
    events = await client.list_events(
        "family@group.calendar.google.com",
        time_min=start,
        time_max=start + timedelta(days=28),
        time_zone="Asia/Tokyo",
    )
"""

import logging
from datetime import datetime
from typing import List, Optional
from urllib.parse import quote

import httpx

from app.environments.base import APIError
from app.environments.google.calendar.schemas import (
    CalendarEvent,
    CalendarInfo,
    CalendarEventsResponse,
    CalendarListResponse,
)


logger = logging.getLogger("wallcal.environments.google.calendar")


class GoogleCalendarClient:
    """
    Google Calendar API client.

    Requires a valid access token with the calendar.readonly scope.
    """

    BASE_URL = "https://www.googleapis.com/calendar/v3"

    # Safety stop for pagination on very busy calendars.
    MAX_PAGES = 10

    def __init__(self, access_token: str):
        self.access_token = access_token

    # -------------------------------------------------------------------------
    # HTTP CLIENT MANAGEMENT
    # -------------------------------------------------------------------------

    def _get_headers(self) -> dict:
        """Get authorization headers for API requests."""
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
        }

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
    ) -> dict:
        """
        Make an authenticated request to the Calendar API.

        Raises:
            APIError: If the request fails (status_code=401 when unauthorized)
        """
        url = f"{self.BASE_URL}{endpoint}"

        async with httpx.AsyncClient() as client:
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._get_headers(),
                    params=params,
                    timeout=30.0,
                )
            except httpx.RequestError as e:
                logger.error(f"Network error in Calendar API: {e}")
                raise APIError(f"Network error: {e}")

        if response.status_code == 401:
            logger.error("Calendar API: Unauthorized (token may be expired)")
            raise APIError(
                "Unauthorized - access token may be expired",
                status_code=401,
                response=response.text,
            )

        if response.status_code == 403:
            logger.error("Calendar API: Forbidden (scope may be missing)")
            raise APIError(
                "Forbidden - calendar scope may not be granted",
                status_code=403,
                response=response.text,
            )

        if response.status_code != 200:
            error_detail = response.text
            logger.error(f"Calendar API error: {response.status_code} - {error_detail}")
            raise APIError(
                f"API request failed: {error_detail}",
                status_code=response.status_code,
                response=error_detail,
            )

        return response.json()

    # -------------------------------------------------------------------------
    # CALENDAR EVENTS
    # -------------------------------------------------------------------------

    async def list_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        time_zone: Optional[str] = None,
        page_size: int = 250,
    ) -> List[CalendarEvent]:
        """
        List events from a calendar within [time_min, time_max).

        Recurring events are expanded into single instances and the result
        is ordered by start time.

        Args:
            calendar_id: Calendar identifier
            time_min: Start of time range (timezone-aware)
            time_max: End of time range (timezone-aware)
            time_zone: Timezone Google should use in returned dateTimes
            page_size: Events per page (max 2500)
        """
        params = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
            "maxResults": min(page_size, 2500),
        }
        if time_zone:
            params["timeZone"] = time_zone

        events: List[CalendarEvent] = []
        for _ in range(self.MAX_PAGES):
            response_data = await self._make_request(
                method="GET",
                endpoint=f"/calendars/{quote(calendar_id, safe='@')}/events",
                params=params,
            )
            page = CalendarEventsResponse(**response_data)
            events.extend(page.items)

            if not page.next_page_token:
                break
            params["pageToken"] = page.next_page_token

        logger.info(f"Fetched {len(events)} events from calendar {calendar_id}")

        return events

    # -------------------------------------------------------------------------
    # CALENDAR LIST
    # -------------------------------------------------------------------------

    async def list_calendars(
        self,
        max_results: int = 100,
        show_hidden: bool = False,
    ) -> List[CalendarInfo]:
        """List calendars the authorized account has access to."""
        params = {
            "maxResults": min(max_results, 250),
            "showHidden": str(show_hidden).lower(),
        }

        logger.info("Fetching calendar list")

        response_data = await self._make_request(
            method="GET",
            endpoint="/users/me/calendarList",
            params=params,
        )

        calendar_list = CalendarListResponse(**response_data)

        logger.info(f"Found {len(calendar_list.items)} calendars")

        return calendar_list.items
