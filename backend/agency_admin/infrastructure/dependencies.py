"""FastAPI dependency injection — wires gateways to the admin workspaces."""

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status

from agency_admin.config import get_settings
from agency_admin.application.services import (
    AdminWorkspace,
    AuthService,
    ContactService,
    NotificationQueue,
    WorkspaceRegistry,
)
from agency_admin.domain.exceptions import PermissionDeniedError
from agency_admin.infrastructure.gateway import GatewayFactory

ADMIN_ROLE = "admin"


@lru_cache
def get_gateway_factory() -> GatewayFactory:
    """Process-wide gateway factory sharing one HTTP connection pool."""
    return GatewayFactory(get_settings())


def build_workspace(access_token: str) -> AdminWorkspace:
    """Create the stores and auth state for one session token."""
    settings = get_settings()
    factory = get_gateway_factory()
    gateway = factory.for_token(access_token)
    return AdminWorkspace(
        gateway,
        AuthService(factory.auth_provider(), gateway),
        bulk_concurrency=settings.bulk_concurrency,
        demo_analytics=settings.demo_analytics,
    )


@lru_cache
def get_workspace_registry() -> WorkspaceRegistry:
    return WorkspaceRegistry(build_workspace)


def get_access_token(authorization: str | None = Header(None)) -> str:
    """Extract the bearer token from the Authorization header."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token.strip()


async def get_session_workspace(
    access_token: str = Depends(get_access_token),
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
) -> AdminWorkspace:
    """The workspace of any signed-in user."""
    workspace = await registry.get_or_restore(access_token)
    if workspace is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired or invalid",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return workspace


async def get_admin_workspace(
    workspace: AdminWorkspace = Depends(get_session_workspace),
) -> AdminWorkspace:
    """The workspace of a signed-in admin; other roles get 403."""
    try:
        workspace.auth.require_role(ADMIN_ROLE)
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return workspace


def get_contact_service() -> ContactService:
    """Contact form service for anonymous visitors."""
    return ContactService(get_gateway_factory().anonymous(), NotificationQueue())
