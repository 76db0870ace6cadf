"""
Routers module - API endpoint handlers organized by feature.

Each router handles a specific part of the display service:
- calendar: The kiosk page, setup page and calendar JSON
- weather: Weekly forecast JSON
- auth: Google OAuth connection
- admin: Admin page, configuration and live reload (HTTP Basic)
- sse: Live-reload event stream for displays
"""
