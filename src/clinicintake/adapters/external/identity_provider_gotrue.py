"""
GoTrue (Supabase Auth) implementation of IdentityProvider.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from ...application.ports.services.identity_provider import IdentityProvider
from ...core.config import AuthSettings
from ...core.exceptions import ConfigurationError, IdentityProviderError

logger = logging.getLogger(__name__)


def _error_message(payload: Any, fallback: str) -> str:
    if isinstance(payload, dict):
        for key in ("error_description", "msg", "message", "error"):
            if payload.get(key):
                return str(payload[key])
    return fallback


class GoTrueIdentityProvider(IdentityProvider):
    """Forwards every call to the provider's REST API and relays its errors."""

    def __init__(self, settings: AuthSettings, session: Optional[aiohttp.ClientSession] = None):
        if not settings.url or not settings.api_key:
            raise ConfigurationError("AUTH_URL and AUTH_API_KEY are required for authentication")
        self._base_url = f"{settings.url}/auth/v1"
        self._api_key = settings.api_key
        self._timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)
        self._session = session

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        headers = {"apikey": self._api_key, "Content-Type": "application/json"}
        headers["Authorization"] = f"Bearer {access_token or self._api_key}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        kwargs = {"json": json, "params": params, "headers": self._headers(access_token)}
        try:
            if self._session is not None:
                return await self._send(self._session, method, url, **kwargs)
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                return await self._send(session, method, url, **kwargs)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Identity provider unreachable: {method} {path}: {e}")
            raise IdentityProviderError(503, f"Identity provider unavailable: {e}") from e

    async def _send(self, session, method: str, url: str, **kwargs) -> Dict[str, Any]:
        async with session.request(method, url, **kwargs) as response:
            if response.status == 204:
                return {}
            try:
                payload = await response.json(content_type=None)
            except ValueError:
                payload = {"message": await response.text()}
            if response.status >= 400:
                raise IdentityProviderError(
                    response.status,
                    _error_message(payload, f"Identity provider returned {response.status}"),
                    {"provider_response": payload},
                )
            return payload or {}

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def sign_up(self, email: str, password: str, profile: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "data": profile or {}},
        )

    async def sign_out(self, access_token: str) -> None:
        await self._request("POST", "/logout", access_token=access_token)

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        return await self._request("GET", "/user", access_token=access_token)

    async def get_session(self, refresh_token: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
