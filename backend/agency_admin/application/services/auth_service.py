"""Auth service — an explicitly passed view of who is signed in.

Replaces a process-wide auth context: each admin workspace owns one
AuthService, and stores that need the current user receive it by
constructor injection.
"""

import logging
from collections.abc import Callable

from agency_admin.application.interfaces import AuthProvider, DataGateway
from agency_admin.domain.entities import (
    AuthSession,
    AuthSnapshot,
    AuthUser,
    MutationResult,
)
from agency_admin.domain.exceptions import GatewayError, PermissionDeniedError

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[AuthSnapshot], None]


class AuthService:
    """Holds the `{user, role, loading}` snapshot and notifies subscribers on change."""

    def __init__(self, provider: AuthProvider, gateway: DataGateway):
        self._provider = provider
        self._gateway = gateway
        self._snapshot = AuthSnapshot()
        self._access_token: str | None = None
        self._listeners: list[SnapshotListener] = []

    @property
    def snapshot(self) -> AuthSnapshot:
        return self._snapshot

    @property
    def access_token(self) -> str | None:
        return self._access_token

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def sign_in_with_password(self, email: str, password: str) -> MutationResult[AuthSession]:
        self._set(AuthSnapshot(loading=True))
        try:
            session = await self._provider.sign_in_with_password(email, password)
            role = await self._resolve_role(session.user)
        except GatewayError as exc:
            logger.warning("Sign-in failed for %s: %s", email, exc.message)
            self._access_token = None
            self._set(AuthSnapshot())
            return MutationResult.fail(exc.message)

        self._access_token = session.access_token
        self._set(AuthSnapshot(user=session.user, role=role))
        return MutationResult.ok(session)

    async def restore(self, access_token: str) -> MutationResult[AuthUser]:
        """Resolve an existing access token into a signed-in snapshot."""
        self._set(AuthSnapshot(loading=True))
        try:
            user = await self._provider.get_user(access_token)
            role = await self._resolve_role(user)
        except GatewayError as exc:
            logger.info("Could not restore session: %s", exc.message)
            self._access_token = None
            self._set(AuthSnapshot())
            return MutationResult.fail(exc.message)

        self._access_token = access_token
        self._set(AuthSnapshot(user=user, role=role))
        return MutationResult.ok(user)

    async def sign_out(self) -> None:
        token = self._access_token
        self._access_token = None
        self._set(AuthSnapshot())
        if token is None:
            return
        try:
            await self._provider.sign_out(token)
        except GatewayError as exc:
            logger.warning("Remote sign-out failed: %s", exc.message)

    def require_role(self, role: str) -> AuthUser:
        """Return the signed-in user, or raise if they do not hold `role`."""
        snapshot = self._snapshot
        if snapshot.user is None or snapshot.role != role:
            raise PermissionDeniedError(role, snapshot.role)
        return snapshot.user

    async def _resolve_role(self, user: AuthUser) -> str:
        """Read the role claim from the user's profile, creating the profile when missing."""
        rows = await self._gateway.select("profiles", match={"id": user.id})
        if rows:
            return rows[0].get("role") or "user"

        logger.info("No profile for %s, creating one", user.email)
        created = await self._gateway.insert(
            "profiles", [{"id": user.id, "email": user.email, "role": "user"}]
        )
        if not created:
            return "user"
        return created[0].get("role") or "user"

    def _set(self, snapshot: AuthSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)
