"""Session endpoints — password sign-in, current session and sign-out."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from agency_admin.application.schemas import SessionResponse, SignInRequest
from agency_admin.application.services import AdminWorkspace, WorkspaceRegistry
from agency_admin.domain.exceptions import GatewayError
from agency_admin.infrastructure.dependencies import (
    get_access_token,
    get_gateway_factory,
    get_session_workspace,
    get_workspace_registry,
)
from agency_admin.infrastructure.gateway import GatewayFactory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _session_response(access_token: str, workspace: AdminWorkspace) -> SessionResponse:
    snapshot = workspace.auth.snapshot
    return SessionResponse(
        access_token=access_token,
        user_id=snapshot.user.id if snapshot.user else "",
        email=snapshot.user.email if snapshot.user else "",
        role=snapshot.role,
    )


@router.post("/sign-in", response_model=SessionResponse)
async def sign_in(
    data: SignInRequest,
    factory: GatewayFactory = Depends(get_gateway_factory),
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
) -> SessionResponse:
    """Exchange credentials for an access token and open its workspace."""
    try:
        session = await factory.auth_provider().sign_in_with_password(data.email, data.password)
    except GatewayError as e:
        logger.info("Rejected sign-in for %s: %s", data.email, e.message)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)

    workspace = await registry.get_or_restore(session.access_token)
    if workspace is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not resolve the signed-in user",
        )
    return _session_response(session.access_token, workspace)


@router.get("/session", response_model=SessionResponse)
async def current_session(
    access_token: str = Depends(get_access_token),
    workspace: AdminWorkspace = Depends(get_session_workspace),
) -> SessionResponse:
    """Who the bearer token belongs to, with their profile role."""
    return _session_response(access_token, workspace)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    access_token: str = Depends(get_access_token),
    workspace: AdminWorkspace = Depends(get_session_workspace),
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
) -> None:
    """End the session and close its workspace."""
    await workspace.auth.sign_out()
    registry.close(access_token)
