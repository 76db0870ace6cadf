"""
Google Auth Module - OAuth 2.0 Authentication for Google Calendar

OAuth 2.0 Flow Overview:
========================
1. Admin opens /auth/login on the display server
2. Backend generates authorization URL with the calendar scope
3. Admin is redirected to Google's consent screen
4. Google redirects back to /auth/callback with an authorization code
5. Backend exchanges code for access + refresh tokens
6. Tokens are stored on disk for the refresh loop to use
"""

from app.environments.google.auth.client import GoogleAuthClient
from app.environments.google.auth.schemas import (
    GoogleTokenResponse,
    CALENDAR_SCOPES,
)

__all__ = [
    "GoogleAuthClient",
    "GoogleTokenResponse",
    "CALENDAR_SCOPES",
]
