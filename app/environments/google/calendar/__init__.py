"""
Google Calendar Module - Calendar API Integration

Fetches the events shown on the wall display and renders the kiosk page.

Features:
=========
- List events of a calendar within a time range (recurrences expanded)
- List available calendars for the admin picker
- Render the multi-week grid as HTML
"""

from app.environments.google.calendar.client import GoogleCalendarClient
from app.environments.google.calendar.schemas import (
    CalendarEvent,
    CalendarInfo,
    EventTime,
)
from app.environments.google.calendar.renderer import CalendarRenderer

__all__ = [
    "GoogleCalendarClient",
    "CalendarEvent",
    "CalendarInfo",
    "EventTime",
    "CalendarRenderer",
]
