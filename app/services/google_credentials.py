"""
Google Credential Manager - the display's single Google account.

Wraps the OAuth client and the token store:
- complete_login(code) exchanges the callback code and stores the tokens
- get_access_token() returns a usable access token, refreshing and
  re-saving an expired one first
- reset() revokes and deletes the stored tokens

Usage:
    from app.services.google_credentials import google_credentials

    token = await google_credentials.get_access_token()
    if token is None:
        # Send the admin to /setup
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.environments.base import OAuthTokens, TokenExpiredError
from app.environments.google.auth import GoogleAuthClient
from app.services.token_store import TokenStore


logger = logging.getLogger("wallcal.services.google_credentials")

# Refresh slightly before Google's expiry so a fetch never races it.
EXPIRY_SKEW = timedelta(seconds=60)


class GoogleCredentialManager:
    def __init__(
        self,
        auth_client: Optional[GoogleAuthClient] = None,
        token_store: Optional[TokenStore] = None,
    ):
        self._auth_client = auth_client
        self.token_store = token_store or TokenStore()

    @property
    def auth_client(self) -> GoogleAuthClient:
        # Created lazily so importing the singleton does not warn about
        # missing OAuth settings.
        if self._auth_client is None:
            self._auth_client = GoogleAuthClient()
        return self._auth_client

    async def is_authenticated(self) -> bool:
        return await self.get_access_token() is not None

    async def get_access_token(self) -> Optional[str]:
        """
        Get a valid access token, refreshing if needed.

        Returns:
            The access token, or None when no usable token is stored
        """
        tokens = self.token_store.load()
        if tokens is None:
            return None

        if not tokens.is_expired(datetime.now(timezone.utc) + EXPIRY_SKEW):
            return tokens.access_token

        if not tokens.refresh_token:
            logger.warning("Token expired and no refresh token stored")
            return None

        logger.info("Token expired, refreshing")
        try:
            refreshed = await self.auth_client.refresh_access_token(tokens.refresh_token)
        except TokenExpiredError as e:
            logger.error(f"Failed to refresh token: {e}")
            return None

        self.token_store.save(refreshed)
        return refreshed.access_token

    async def complete_login(self, code: str) -> OAuthTokens:
        """
        Exchange an authorization code and persist the tokens.

        Raises:
            AuthenticationError: If the exchange fails
        """
        tokens = await self.auth_client.exchange_code_for_tokens(code)

        # A repeat consent may omit the refresh token; keep the old one.
        if not tokens.refresh_token:
            previous = self.token_store.load()
            if previous is not None:
                tokens.refresh_token = previous.refresh_token

        self.token_store.save(tokens)
        logger.info("Google account connected")
        return tokens

    async def reset(self) -> bool:
        """
        Revoke and delete the stored tokens.

        Returns:
            True if a token was stored
        """
        tokens = self.token_store.load()
        if tokens is None:
            return False

        revoke_target = tokens.refresh_token or tokens.access_token
        if not await self.auth_client.revoke_token(revoke_target):
            logger.warning("Token revocation failed; deleting local copy anyway")

        self.token_store.clear()
        logger.info("Authentication reset successfully")
        return True


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
google_credentials = GoogleCredentialManager()
