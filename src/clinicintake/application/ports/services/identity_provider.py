"""
Managed identity provider interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class IdentityProvider(ABC):
    """Thin pass-through to a managed identity service.

    Provider errors are raised unchanged as IdentityProviderError.
    """

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """Password sign-in; returns the provider session payload."""
        pass

    @abstractmethod
    async def sign_up(self, email: str, password: str, profile: Dict[str, Any]) -> Dict[str, Any]:
        """Register an account with profile metadata."""
        pass

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind ``access_token``."""
        pass

    @abstractmethod
    async def get_user(self, access_token: str) -> Dict[str, Any]:
        """Return the user owning ``access_token``."""
        pass

    @abstractmethod
    async def get_session(self, refresh_token: str) -> Dict[str, Any]:
        """Exchange a refresh token for the current session."""
        pass
