"""
Tests for the Google OAuth client.
"""

from urllib.parse import parse_qs, urlparse

import pytest
from unittest.mock import AsyncMock, patch

from app.environments.base import EnvironmentProvider
from app.environments.google.auth import CALENDAR_SCOPES, GoogleAuthClient, GoogleTokenResponse


@pytest.fixture
def auth_client():
    return GoogleAuthClient(
        client_id="client-id.apps.googleusercontent.com",
        client_secret="secret",
        redirect_uri="http://localhost:3000/auth/callback",
    )


class TestAuthorizationUrl:
    def test_offline_consent_readonly(self, auth_client):
        url = auth_client.get_authorization_url(scopes=CALENDAR_SCOPES, state="xyz")
        query = parse_qs(urlparse(url).query)

        assert url.startswith(GoogleAuthClient.AUTHORIZATION_URL)
        assert query["access_type"] == ["offline"]
        assert query["prompt"] == ["consent"]
        assert query["state"] == ["xyz"]
        assert query["scope"] == ["https://www.googleapis.com/auth/calendar.readonly"]
        assert query["redirect_uri"] == ["http://localhost:3000/auth/callback"]

    def test_is_configured(self, auth_client):
        assert auth_client.is_configured

    def test_implements_provider_contract(self, auth_client):
        assert isinstance(auth_client, EnvironmentProvider)

    def test_state_is_random(self):
        assert GoogleAuthClient.generate_state() != GoogleAuthClient.generate_state()


class TestTokenRequests:
    @pytest.mark.asyncio
    async def test_exchange_code(self, auth_client):
        response = GoogleTokenResponse(
            access_token="ya29.new", expires_in=3599, refresh_token="1//r",
            scope="https://www.googleapis.com/auth/calendar.readonly",
        )

        with patch.object(auth_client, "_post_token_request", AsyncMock(return_value=response)) as post:
            tokens = await auth_client.exchange_code_for_tokens("4/code")

        assert tokens.access_token == "ya29.new"
        assert tokens.refresh_token == "1//r"
        assert tokens.expires_at is not None
        assert tokens.scopes == CALENDAR_SCOPES
        assert post.await_args.args[0]["grant_type"] == "authorization_code"

    @pytest.mark.asyncio
    async def test_refresh_keeps_refresh_token(self, auth_client):
        response = GoogleTokenResponse(access_token="ya29.fresh", expires_in=3599)

        with patch.object(auth_client, "_post_token_request", AsyncMock(return_value=response)):
            tokens = await auth_client.refresh_access_token("1//old")

        assert tokens.access_token == "ya29.fresh"
        assert tokens.refresh_token == "1//old"
