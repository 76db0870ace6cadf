"""
Google Environment Module - Google Calendar integration for the display.

Architecture:
=============
google/
├── __init__.py           # Module exports
├── auth/                 # OAuth authentication
│   ├── client.py         # Google OAuth implementation
│   └── schemas.py        # Token response and scopes
└── calendar/             # Google Calendar API
    ├── client.py         # Calendar API client
    ├── schemas.py        # Calendar data structures
    └── renderer.py       # HTML rendering for display

Usage:
======
    from app.environments.google import GoogleAuthClient, GoogleCalendarClient

    auth_client = GoogleAuthClient()
    auth_url = auth_client.get_authorization_url(scopes=CALENDAR_SCOPES, state="...")

    # After callback
    tokens = await auth_client.exchange_code_for_tokens(code)

    calendar = GoogleCalendarClient(access_token=tokens.access_token)
    events = await calendar.list_events(calendar_id, time_min, time_max)
"""

from app.environments.google.auth import GoogleAuthClient, CALENDAR_SCOPES
from app.environments.google.calendar import GoogleCalendarClient, CalendarEvent

__all__ = [
    "GoogleAuthClient",
    "GoogleCalendarClient",
    "CalendarEvent",
    "CALENDAR_SCOPES",
]
