"""
Tests for the token store and the Google credential manager.

These tests verify:
- Token persistence on disk
- Access token refresh and re-save
- Login keeps an existing refresh token
- Reset revokes and deletes
"""

from datetime import datetime, timedelta, timezone

import pytest
from unittest.mock import AsyncMock, MagicMock

from app.environments.base import OAuthTokens, TokenExpiredError
from app.services.google_credentials import GoogleCredentialManager


def _tokens(access="ya29.old", refresh="1//refresh", expires_in=3600):
    return OAuthTokens(
        access_token=access,
        refresh_token=refresh,
        expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        scopes=["https://www.googleapis.com/auth/calendar.readonly"],
    )


@pytest.fixture
def auth_client():
    client = MagicMock()
    client.refresh_access_token = AsyncMock(return_value=_tokens(access="ya29.new"))
    client.exchange_code_for_tokens = AsyncMock(return_value=_tokens(access="ya29.login"))
    client.revoke_token = AsyncMock(return_value=True)
    return client


@pytest.fixture
def manager(auth_client, token_store):
    return GoogleCredentialManager(auth_client=auth_client, token_store=token_store)


class TestTokenStore:
    """Tests for the JSON token file."""

    def test_missing_file(self, token_store):
        assert token_store.load() is None

    def test_save_and_load(self, token_store):
        tokens = _tokens()

        token_store.save(tokens)
        loaded = token_store.load()

        assert loaded.access_token == tokens.access_token
        assert loaded.refresh_token == tokens.refresh_token
        assert loaded.expires_at == tokens.expires_at

    def test_unreadable_file(self, token_store):
        token_store.path.parent.mkdir(parents=True)
        token_store.path.write_text("{}", encoding="utf-8")

        assert token_store.load() is None

    def test_clear(self, token_store):
        token_store.save(_tokens())

        assert token_store.clear() is True
        assert token_store.clear() is False
        assert token_store.load() is None


class TestGetAccessToken:
    """Tests for access token retrieval."""

    @pytest.mark.asyncio
    async def test_no_tokens(self, manager):
        assert await manager.get_access_token() is None
        assert await manager.is_authenticated() is False

    @pytest.mark.asyncio
    async def test_valid_token(self, manager, token_store, auth_client):
        token_store.save(_tokens())

        assert await manager.get_access_token() == "ya29.old"
        auth_client.refresh_access_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed_and_saved(self, manager, token_store, auth_client):
        token_store.save(_tokens(expires_in=-10))

        assert await manager.get_access_token() == "ya29.new"
        auth_client.refresh_access_token.assert_awaited_once_with("1//refresh")
        assert token_store.load().access_token == "ya29.new"

    @pytest.mark.asyncio
    async def test_token_about_to_expire_is_refreshed(self, manager, token_store):
        token_store.save(_tokens(expires_in=30))

        assert await manager.get_access_token() == "ya29.new"

    @pytest.mark.asyncio
    async def test_expired_without_refresh_token(self, manager, token_store):
        token_store.save(_tokens(refresh=None, expires_in=-10))

        assert await manager.get_access_token() is None

    @pytest.mark.asyncio
    async def test_refresh_rejected(self, manager, token_store, auth_client):
        token_store.save(_tokens(expires_in=-10))
        auth_client.refresh_access_token.side_effect = TokenExpiredError("invalid_grant")

        assert await manager.get_access_token() is None


class TestCompleteLogin:
    @pytest.mark.asyncio
    async def test_stores_tokens(self, manager, token_store):
        await manager.complete_login("auth-code")

        assert token_store.load().access_token == "ya29.login"

    @pytest.mark.asyncio
    async def test_keeps_previous_refresh_token(self, manager, token_store, auth_client):
        token_store.save(_tokens(refresh="1//kept"))
        auth_client.exchange_code_for_tokens.return_value = _tokens(access="ya29.again", refresh=None)

        await manager.complete_login("auth-code")

        stored = token_store.load()
        assert stored.access_token == "ya29.again"
        assert stored.refresh_token == "1//kept"


class TestReset:
    @pytest.mark.asyncio
    async def test_revokes_and_deletes(self, manager, token_store, auth_client):
        token_store.save(_tokens())

        assert await manager.reset() is True
        auth_client.revoke_token.assert_awaited_once_with("1//refresh")
        assert token_store.load() is None

    @pytest.mark.asyncio
    async def test_failed_revocation_still_deletes(self, manager, token_store, auth_client):
        token_store.save(_tokens())
        auth_client.revoke_token.return_value = False

        assert await manager.reset() is True
        assert token_store.load() is None

    @pytest.mark.asyncio
    async def test_nothing_stored(self, manager, auth_client):
        assert await manager.reset() is False
        auth_client.revoke_token.assert_not_called()
