"""
GoTrue identity provider tests with a recorded HTTP session double.
"""

import pytest

from clinicintake.adapters.external.identity_provider_gotrue import GoTrueIdentityProvider
from clinicintake.core.config import AuthSettings
from clinicintake.core.exceptions import ConfigurationError, IdentityProviderError


class FakeResponse:
    def __init__(self, status, payload):
        self.status = status
        self._payload = payload

    async def json(self, content_type=None):
        return self._payload

    async def text(self):
        return str(self._payload)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, status=200, payload=None):
        self.status = status
        self.payload = payload if payload is not None else {}
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        return FakeResponse(self.status, self.payload)


SETTINGS = AuthSettings(url="https://auth.example.com/", api_key="anon-key")


def provider(session):
    return GoTrueIdentityProvider(SETTINGS, session=session)


@pytest.mark.asyncio
async def test_sign_in_posts_password_grant():
    session = FakeSession(payload={"access_token": "at", "refresh_token": "rt"})

    result = await provider(session).sign_in("nurse@example.com", "secret")

    assert result["access_token"] == "at"
    method, url, kwargs = session.requests[0]
    assert method == "POST"
    assert url == "https://auth.example.com/auth/v1/token"
    assert kwargs["params"] == {"grant_type": "password"}
    assert kwargs["json"] == {"email": "nurse@example.com", "password": "secret"}
    assert kwargs["headers"]["apikey"] == "anon-key"


@pytest.mark.asyncio
async def test_sign_up_sends_profile_metadata():
    session = FakeSession(payload={"id": "u1"})

    await provider(session).sign_up("nurse@example.com", "secret1", {"first_name": "Ana"})

    _, url, kwargs = session.requests[0]
    assert url.endswith("/auth/v1/signup")
    assert kwargs["json"]["data"] == {"first_name": "Ana"}


@pytest.mark.asyncio
async def test_user_and_logout_use_bearer_token():
    session = FakeSession(payload={"id": "u1", "email": "nurse@example.com"})
    identity = provider(session)

    user = await identity.get_user("user-token")
    await identity.sign_out("user-token")

    assert user["email"] == "nurse@example.com"
    assert session.requests[0][0] == "GET"
    assert session.requests[0][1].endswith("/auth/v1/user")
    assert session.requests[1][1].endswith("/auth/v1/logout")
    for _, _, kwargs in session.requests:
        assert kwargs["headers"]["Authorization"] == "Bearer user-token"


@pytest.mark.asyncio
async def test_refresh_session_grant():
    session = FakeSession(payload={"access_token": "new"})

    await provider(session).get_session("rt")

    _, _, kwargs = session.requests[0]
    assert kwargs["params"] == {"grant_type": "refresh_token"}
    assert kwargs["json"] == {"refresh_token": "rt"}


@pytest.mark.asyncio
async def test_provider_error_passed_through():
    session = FakeSession(
        status=400,
        payload={"error": "invalid_grant", "error_description": "Invalid login credentials"},
    )

    with pytest.raises(IdentityProviderError) as exc_info:
        await provider(session).sign_in("nurse@example.com", "wrong")

    assert exc_info.value.status == 400
    assert exc_info.value.message == "Invalid login credentials"


def test_requires_configuration():
    with pytest.raises(ConfigurationError):
        GoTrueIdentityProvider(AuthSettings(url="", api_key=""))
