"""Tests for TokenManager against the fake bank"""

import pytest
from authlib.integrations.base_client import OAuthError
from cryptography.fernet import Fernet

from csas_sync.auth.oauth_manager import TokenManager
from csas_sync.exceptions import AuthError, RequestError
from tests.helpers import FakeBank


async def test_refresh_posts_refresh_token_grant(fake_bank: FakeBank, token_manager: TokenManager):
    assert token_manager.has_access_token is False

    assert await token_manager.refresh_access_token() is True

    assert token_manager.access_token == "access-1"
    assert fake_bank.token_requests == [
        {
            "client_id": "client-id",
            "client_secret": "client-secret",
            "redirect_uri": "https://localhost/code",
            "grant_type": "refresh_token",
            "refresh_token": "refresh-token",
        }
    ]


async def test_failed_refresh_keeps_previous_token(fake_bank: FakeBank, token_manager: TokenManager):
    await token_manager.refresh_access_token()

    fake_bank.token_response = (401, {"error": "invalid_grant"})
    assert await token_manager.refresh_access_token() is False
    assert token_manager.access_token == "access-1"

    fake_bank.token_response = (200, {"token_type": "bearer"})
    assert await token_manager.refresh_access_token() is False
    assert token_manager.access_token == "access-1"


async def test_refresh_without_access_token_stays_unauthenticated(fake_bank: FakeBank, token_manager: TokenManager):
    fake_bank.token_response = (200, {"access_token": ""})

    assert await token_manager.refresh_access_token() is False
    assert token_manager.has_access_token is False


async def test_unreachable_token_endpoint_raises_auth_error():
    manager = TokenManager({"host": "http://127.0.0.1:1", "timeout": 2})

    with pytest.raises(AuthError) as exc_info:
        await manager._request_access_token()

    assert isinstance(exc_info.value, OAuthError)
    assert await manager.refresh_access_token() is False


async def test_authenticated_get_sends_api_key_and_bearer(fake_bank: FakeBank, token_manager: TokenManager):
    fake_bank.respond("my/accounts", {"accounts": []})
    await token_manager.refresh_access_token()

    data = await token_manager.authenticated_get("my/accounts")

    assert data == {"accounts": []}
    headers = fake_bank.headers["my/accounts"]
    assert headers["WEB-API-key"] == "api-key"
    assert headers["Authorization"] == "Bearer access-1"


async def test_authenticated_get_non_2xx_raises_request_error(fake_bank: FakeBank, token_manager: TokenManager):
    fake_bank.respond("my/cards", {"errors": []}, status=500)

    with pytest.raises(RequestError) as exc_info:
        await token_manager.authenticated_get("my/cards")

    assert exc_info.value.status == 500


async def test_clear_forgets_access_token(fake_bank: FakeBank, token_manager: TokenManager):
    await token_manager.refresh_access_token()

    token_manager.clear()

    assert token_manager.access_token == ""


def test_configured_encryption_key_is_used():
    key = Fernet.generate_key().decode("utf-8")
    manager = TokenManager({"host": "https://www.csas.cz"}, encryption_key=key)
    manager._store_access_token("secret-token")

    assert Fernet(key.encode("utf-8")).decrypt(manager._token) == b"secret-token"


def test_invalid_encryption_key_is_derived():
    manager = TokenManager({"host": "https://www.csas.cz"}, encryption_key="not a fernet key")
    manager._store_access_token("secret-token")

    assert manager.access_token == "secret-token"


def test_urls_are_built_from_host():
    manager = TokenManager({"host": "https://www.csas.cz/"})

    assert manager.token_url == "https://www.csas.cz/widp/oauth2/token"
    assert manager.api_base_url == "https://www.csas.cz/webapi/api/v3/netbanking/"
