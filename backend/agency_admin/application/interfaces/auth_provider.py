"""Abstract auth provider interface — port for the hosted auth API."""

from abc import ABC, abstractmethod

from agency_admin.domain.entities import AuthSession, AuthUser


class AuthProvider(ABC):
    """Port — session handling is delegated to the backing service."""

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a session.

        Raises:
            GatewayError: If the credentials are rejected.
        """
        ...

    @abstractmethod
    async def get_user(self, access_token: str) -> AuthUser:
        """Resolve the user owning `access_token`."""
        ...

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        ...
