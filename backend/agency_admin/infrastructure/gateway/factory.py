"""Builds gateways and auth providers for the configured backend."""

import logging

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agency_admin.application.interfaces import AuthProvider, DataGateway
from agency_admin.config import Settings
from agency_admin.infrastructure.gateway.local_functions import LOCAL_FUNCTIONS
from agency_admin.infrastructure.gateway.rest_gateway import RestAuthProvider, RestDataGateway
from agency_admin.infrastructure.gateway.sqlalchemy_gateway import SQLAlchemyDataGateway

logger = logging.getLogger(__name__)

GATEWAY_BACKENDS = ("rest", "sql")


class GatewayFactory:
    """Creates per-session gateways that share one HTTP connection pool.

    With `gateway_backend="rest"` every gateway carries the caller's
    access token so the hosted backend applies row-level security. With
    `"sql"` all sessions share the SQLAlchemy session factory. Sign-in is
    always delegated to the hosted auth API.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        http_client: httpx.AsyncClient | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        if settings.gateway_backend not in GATEWAY_BACKENDS:
            raise ValueError(
                f"gateway_backend must be one of {GATEWAY_BACKENDS}, got '{settings.gateway_backend}'"
            )
        self._settings = settings
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=settings.gateway_timeout)
        self._session_factory = session_factory

    @property
    def backend(self) -> str:
        return self._settings.gateway_backend

    def for_token(self, access_token: str | None) -> DataGateway:
        if self.backend == "sql":
            return SQLAlchemyDataGateway(self._get_session_factory(), LOCAL_FUNCTIONS)
        return RestDataGateway(
            self._settings.gateway_url,
            self._settings.gateway_anon_key,
            access_token=access_token,
            http_client=self._http_client,
            timeout=self._settings.gateway_timeout,
        )

    def anonymous(self) -> DataGateway:
        """Gateway for public callers such as the contact form."""
        return self.for_token(None)

    def auth_provider(self) -> AuthProvider:
        return RestAuthProvider(
            self._settings.gateway_url,
            self._settings.gateway_anon_key,
            http_client=self._http_client,
            timeout=self._settings.gateway_timeout,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    def _get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            from agency_admin.infrastructure.database import get_session_factory

            self._session_factory = get_session_factory()
            logger.info("Using self-hosted database gateway")
        return self._session_factory
