"""
Auth router - connects the display to a Google account.

Endpoints:
==========
- GET  /auth/login    → Redirect to Google's consent screen
- GET  /auth/callback → Handle the OAuth callback, store tokens
- POST /auth/reset    → Revoke and forget the stored tokens (admin only)
- GET  /auth/status   → {"authenticated": bool}

OAuth Flow:
===========
1. Admin opens /setup and clicks the connect link
2. /auth/login stores a CSRF state and redirects to Google
3. Google redirects to /auth/callback with code and state
4. The code is exchanged and the tokens are written to DATA_DIR
5. The browser lands on "/" (or on /setup?error=... on failure)
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from app.deps import get_credentials, get_refresh_service, require_admin
from app.environments.base import AuthenticationError
from app.environments.google.auth import CALENDAR_SCOPES
from app.services.google_credentials import GoogleCredentialManager
from app.services.refresh_service import RefreshService


logger = logging.getLogger("wallcal.routers.auth")

# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# STATE STORAGE (In-memory)
# ---------------------------------------------------------------------------
# One process serves the display, so a dict is enough. States expire after
# STATE_TTL_SECONDS.
STATE_TTL_SECONDS = 600
_oauth_states: dict[str, float] = {}


def _store_state(state: str) -> None:
    now = time.monotonic()
    for stale in [key for key, created in _oauth_states.items() if now - created > STATE_TTL_SECONDS]:
        del _oauth_states[stale]
    _oauth_states[state] = now


def _consume_state(state: str) -> bool:
    created = _oauth_states.pop(state, None)
    return created is not None and time.monotonic() - created <= STATE_TTL_SECONDS


def _setup_redirect(error: str) -> RedirectResponse:
    return RedirectResponse(url=f"/setup?error={error}", status_code=status.HTTP_302_FOUND)


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------


@router.get("/login")
async def login(
    credentials: GoogleCredentialManager = Depends(get_credentials),
):
    """Redirect to Google's OAuth consent screen."""
    auth_client = credentials.auth_client

    if not auth_client.is_configured:
        logger.error("Google OAuth not configured - missing GOOGLE_CLIENT_ID")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google OAuth is not configured. Please set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET.",
        )

    state = auth_client.generate_state()
    _store_state(state)

    auth_url = auth_client.get_authorization_url(scopes=CALENDAR_SCOPES, state=state)

    logger.info("Starting Google OAuth flow")
    return RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)


@router.get("/callback")
async def callback(
    code: Optional[str] = Query(None, description="Authorization code from Google"),
    state: Optional[str] = Query(None, description="CSRF state token"),
    error: Optional[str] = Query(None, description="Error from Google"),
    credentials: GoogleCredentialManager = Depends(get_credentials),
    refresher: RefreshService = Depends(get_refresh_service),
):
    """
    Handle Google's redirect after consent.

    Every failure lands on /setup with an error code the setup page
    understands: auth_denied, no_code, invalid_state, token_exchange_failed.
    """
    if error:
        logger.warning(f"Google OAuth error: {error}")
        return _setup_redirect("auth_denied")

    if not code:
        return _setup_redirect("no_code")

    if not state or not _consume_state(state):
        logger.warning("Invalid or expired OAuth state")
        return _setup_redirect("invalid_state")

    try:
        await credentials.complete_login(code)
    except AuthenticationError as e:
        logger.error(f"Failed to exchange code for tokens: {e}")
        return _setup_redirect("token_exchange_failed")

    refresher.state.auth_required = False
    logger.info("Authentication successful")
    return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)


@router.post("/reset")
async def reset(
    _admin: str = Depends(require_admin),
    credentials: GoogleCredentialManager = Depends(get_credentials),
):
    """Forget the connected Google account."""
    await credentials.reset()
    return {"success": True, "message": "Authentication reset successfully"}


@router.get("/status")
async def auth_status(
    credentials: GoogleCredentialManager = Depends(get_credentials),
):
    return {"authenticated": await credentials.is_authenticated()}
