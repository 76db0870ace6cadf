"""
Google OAuth Client - Handles OAuth 2.0 flow with Google APIs.

OAuth 2.0 Flow Implementation:
==============================
1. get_authorization_url() → Admin is redirected to Google
2. exchange_code_for_tokens() → Called in callback, gets tokens
3. refresh_access_token() → Renew expired access tokens
4. revoke_token() → Invalidate tokens when authentication is reset

References:
===========
- OAuth 2.0: https://developers.google.com/identity/protocols/oauth2
- Token endpoint: https://oauth2.googleapis.com/token
"""

import logging
import secrets
from typing import List, Optional
from urllib.parse import urlencode

import httpx

from app.core.config import settings
from app.environments.base import (
    EnvironmentProvider,
    OAuthTokens,
    AuthenticationError,
    TokenExpiredError,
)
from app.environments.google.auth.schemas import GoogleTokenResponse


logger = logging.getLogger("wallcal.environments.google.auth")


class GoogleAuthClient(EnvironmentProvider):
    """
    Google OAuth 2.0 Client implementation.

    Example Usage:
        client = GoogleAuthClient()

        # Step 1: Generate auth URL
        auth_url = client.get_authorization_url(
            scopes=CALENDAR_SCOPES,
            state=client.generate_state(),
        )

        # Step 2: Handle callback
        tokens = await client.exchange_code_for_tokens(code="abc123")
    """

    # Google OAuth endpoints
    AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    REVOKE_URL = "https://oauth2.googleapis.com/revoke"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
    ):
        """
        Args:
            client_id: Google OAuth Client ID (defaults to settings)
            client_secret: Google OAuth Client Secret (defaults to settings)
            redirect_uri: OAuth callback URL (defaults to settings)
        """
        self.client_id = client_id or settings.GOOGLE_CLIENT_ID
        self.client_secret = client_secret or settings.GOOGLE_CLIENT_SECRET
        self.redirect_uri = redirect_uri or settings.GOOGLE_REDIRECT_URI

        if not self.client_id or not self.client_secret:
            logger.warning(
                "Google OAuth not configured. Set GOOGLE_CLIENT_ID and "
                "GOOGLE_CLIENT_SECRET in environment variables."
            )

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    # -------------------------------------------------------------------------
    # AUTHORIZATION URL
    # -------------------------------------------------------------------------

    def get_authorization_url(
        self,
        scopes: List[str],
        state: str,
        access_type: str = "offline",
        prompt: str = "consent",
    ) -> str:
        """
        Generate the Google OAuth authorization URL.

        Args:
            scopes: OAuth scopes to request (e.g., CALENDAR_SCOPES)
            state: CSRF protection token, checked again in the callback
            access_type: "offline" so Google issues a refresh token
            prompt: "consent" forces the consent screen (always yields a refresh token)

        Returns:
            Full authorization URL to redirect the browser to
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(scopes),
            "state": state,
            "access_type": access_type,
            "prompt": prompt,
        }

        auth_url = f"{self.AUTHORIZATION_URL}?{urlencode(params)}"

        logger.info(f"Generated Google auth URL with {len(scopes)} scopes")

        return auth_url

    # -------------------------------------------------------------------------
    # TOKEN EXCHANGE
    # -------------------------------------------------------------------------

    async def _post_token_request(self, data: dict, error_cls: type) -> GoogleTokenResponse:
        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(self.TOKEN_URL, data=data, timeout=30.0)
            except httpx.RequestError as e:
                logger.error(f"Network error calling token endpoint: {e}")
                raise error_cls(f"Network error: {e}")

        if response.status_code != 200:
            error_data = response.json() if response.content else {}
            error_msg = error_data.get("error_description", response.text)
            logger.error(f"Token endpoint returned {response.status_code}: {error_msg}")
            raise error_cls(f"Token request failed: {error_msg}")

        return GoogleTokenResponse(**response.json())

    async def exchange_code_for_tokens(self, code: str) -> OAuthTokens:
        """
        Exchange authorization code for access and refresh tokens.

        Raises:
            AuthenticationError: If token exchange fails
        """
        logger.info("Exchanging authorization code for tokens")

        token_response = await self._post_token_request(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": self.redirect_uri,
            },
            AuthenticationError,
        )

        logger.info(
            "Successfully obtained Google tokens",
            extra={
                "has_refresh_token": token_response.refresh_token is not None,
                "expires_in": token_response.expires_in,
            }
        )

        return OAuthTokens(
            access_token=token_response.access_token,
            token_type=token_response.token_type,
            refresh_token=token_response.refresh_token,
            expires_at=token_response.get_expires_at(),
            scopes=token_response.get_scopes_list(),
        )

    # -------------------------------------------------------------------------
    # TOKEN REFRESH
    # -------------------------------------------------------------------------

    async def refresh_access_token(self, refresh_token: str) -> OAuthTokens:
        """
        Use refresh token to get a new access token.

        Raises:
            TokenExpiredError: If refresh token is invalid or revoked
        """
        logger.info("Refreshing access token")

        token_response = await self._post_token_request(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
            TokenExpiredError,
        )

        # Google usually omits refresh_token on refresh; keep the old one.
        return OAuthTokens(
            access_token=token_response.access_token,
            token_type=token_response.token_type,
            refresh_token=token_response.refresh_token or refresh_token,
            expires_at=token_response.get_expires_at(),
            scopes=token_response.get_scopes_list(),
        )

    # -------------------------------------------------------------------------
    # TOKEN REVOCATION
    # -------------------------------------------------------------------------

    async def revoke_token(self, token: str) -> bool:
        """
        Revoke an access or refresh token.

        Returns:
            True if revocation succeeded
        """
        logger.info("Revoking Google token")

        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(
                    self.REVOKE_URL,
                    params={"token": token},
                    timeout=30.0,
                )
            except httpx.RequestError as e:
                logger.error(f"Network error during token revocation: {e}")
                return False

        success = response.status_code == 200
        if not success:
            logger.warning(f"Token revocation returned status {response.status_code}")
        return success

    @staticmethod
    def generate_state() -> str:
        """Cryptographically secure CSRF state parameter."""
        return secrets.token_urlsafe(32)
