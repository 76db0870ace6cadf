"""
Google Calendar Schemas - Data structures for calendar API responses.

These Pydantic models mirror the subset of the Calendar API v3 resources the
display uses. They are converted into the display's own Event records by
the calendar service.

Reference: https://developers.google.com/calendar/api/v3/reference
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventTime(BaseModel):
    """
    Event start or end time.

    Google Calendar API returns times in one of two formats:
    - dateTime: For timed events (e.g., "2024-01-15T10:00:00+09:00")
    - date: For all-day events (e.g., "2024-01-15")

    Both are kept as the raw strings Google sent; the display's Event model
    does the parsing.
    """
    model_config = ConfigDict(populate_by_name=True)

    date_time: Optional[str] = Field(None, alias="dateTime")
    date: Optional[str] = Field(None)
    time_zone: Optional[str] = Field(None, alias="timeZone")

    def is_all_day(self) -> bool:
        """Check if this is an all-day event (date only, no time)."""
        return self.date_time is None

    def value(self) -> str:
        return self.date_time or self.date or ""


class CalendarEvent(BaseModel):
    """
    A Google Calendar event.

    Reference: https://developers.google.com/calendar/api/v3/reference/events
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique event identifier")
    summary: Optional[str] = Field(None, description="Event title")
    start: Optional[EventTime] = Field(None, description="Event start time")
    end: Optional[EventTime] = Field(None, description="Event end time")
    status: Optional[str] = Field(None, description="confirmed, tentative, cancelled")
    recurring_event_id: Optional[str] = Field(None, alias="recurringEventId")
    color_id: Optional[str] = Field(None, alias="colorId")

    def is_all_day(self) -> bool:
        """An event without a start dateTime is an all-day event."""
        if self.start:
            return self.start.is_all_day()
        return False


class CalendarInfo(BaseModel):
    """
    Information about a Google Calendar.

    Used by the admin calendar picker.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Calendar identifier (usually email)")
    summary: str = Field("", description="Calendar title")
    description: Optional[str] = Field(None)
    primary: Optional[bool] = Field(False, description="Is this the primary calendar?")
    background_color: Optional[str] = Field(None, alias="backgroundColor")
    foreground_color: Optional[str] = Field(None, alias="foregroundColor")
    access_role: Optional[str] = Field(None, alias="accessRole")


class CalendarEventsResponse(BaseModel):
    """
    Response from the Calendar Events list API.

    Contains a page of events and the token for the next page.
    """
    model_config = ConfigDict(populate_by_name=True)

    kind: Optional[str] = Field(None)
    summary: Optional[str] = Field(None, description="Calendar title")
    time_zone: Optional[str] = Field(None, alias="timeZone")
    items: List[CalendarEvent] = Field(default_factory=list)
    next_page_token: Optional[str] = Field(None, alias="nextPageToken")


class CalendarListResponse(BaseModel):
    """Response from the CalendarList API."""
    model_config = ConfigDict(populate_by_name=True)

    kind: Optional[str] = Field(None)
    items: List[CalendarInfo] = Field(default_factory=list)
    next_page_token: Optional[str] = Field(None, alias="nextPageToken")
