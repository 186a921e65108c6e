"""Unit tests for AuthService and WorkspaceRegistry."""

import pytest

from agency_admin.application.services import AdminWorkspace, AuthService, WorkspaceRegistry
from agency_admin.domain.entities import AuthSnapshot
from agency_admin.domain.exceptions import PermissionDeniedError
from tests.fakes import FakeAuthProvider, InMemoryGateway, profile_row


@pytest.fixture
def provider() -> FakeAuthProvider:
    provider = FakeAuthProvider()
    provider.register("admin-1", "admin@example.com", "hunter2")
    provider.register("user-1", "user@example.com")
    return provider


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway(
        {
            "profiles": [
                profile_row("admin-1", "admin@example.com", "admin"),
                profile_row("user-1", "user@example.com", "user"),
            ]
        }
    )


@pytest.fixture
def auth(provider: FakeAuthProvider, gateway: InMemoryGateway) -> AuthService:
    return AuthService(provider, gateway)


@pytest.mark.asyncio
async def test_sign_in_resolves_role_from_profile(auth: AuthService):
    result = await auth.sign_in_with_password("admin@example.com", "hunter2")

    assert result.success
    assert auth.snapshot.user.id == "admin-1"
    assert auth.snapshot.role == "admin"
    assert not auth.snapshot.loading
    assert auth.access_token == "token-admin-1"


@pytest.mark.asyncio
async def test_sign_in_with_wrong_password_fails(auth: AuthService):
    result = await auth.sign_in_with_password("admin@example.com", "nope")

    assert not result.success
    assert result.error == "Invalid login credentials"
    assert auth.snapshot == AuthSnapshot()
    assert auth.access_token is None


@pytest.mark.asyncio
async def test_subscribers_see_loading_then_signed_in(auth: AuthService):
    seen: list[AuthSnapshot] = []
    unsubscribe = auth.subscribe(seen.append)

    await auth.sign_in_with_password("user@example.com", "secret")
    unsubscribe()
    await auth.sign_out()

    assert [s.loading for s in seen] == [True, False]
    assert seen[-1].role == "user"


@pytest.mark.asyncio
async def test_missing_profile_is_created_with_user_role(
    provider: FakeAuthProvider, gateway: InMemoryGateway
):
    token = provider.register("new-1", "new@example.com")
    auth = AuthService(provider, gateway)

    result = await auth.restore(token)

    assert result.success
    assert auth.snapshot.role == "user"
    assert any(row["id"] == "new-1" for row in gateway.tables["profiles"])


@pytest.mark.asyncio
async def test_restore_with_unknown_token_fails(auth: AuthService):
    result = await auth.restore("forged")

    assert not result.success
    assert not auth.snapshot.is_authenticated


@pytest.mark.asyncio
async def test_require_role(auth: AuthService):
    await auth.sign_in_with_password("user@example.com", "secret")

    with pytest.raises(PermissionDeniedError):
        auth.require_role("admin")
    assert auth.require_role("user").id == "user-1"


@pytest.mark.asyncio
async def test_sign_out_revokes_remote_session(auth: AuthService, provider: FakeAuthProvider):
    await auth.sign_in_with_password("admin@example.com", "hunter2")

    await auth.sign_out()

    assert provider.signed_out == ["token-admin-1"]
    assert not auth.snapshot.is_authenticated
    with pytest.raises(PermissionDeniedError):
        auth.require_role("admin")


# ── WorkspaceRegistry ──


def _registry(provider: FakeAuthProvider, gateway: InMemoryGateway, **kwargs) -> WorkspaceRegistry:
    return WorkspaceRegistry(
        lambda token: AdminWorkspace(gateway, AuthService(provider, gateway)), **kwargs
    )


@pytest.mark.asyncio
async def test_registry_reuses_workspace_per_token(
    provider: FakeAuthProvider, gateway: InMemoryGateway
):
    registry = _registry(provider, gateway)

    first = await registry.get_or_restore("token-admin-1")
    second = await registry.get_or_restore("token-admin-1")

    assert first is second
    assert first.auth.snapshot.role == "admin"
    assert len(registry) == 1


@pytest.mark.asyncio
async def test_registry_rejects_invalid_token(provider: FakeAuthProvider, gateway: InMemoryGateway):
    registry = _registry(provider, gateway)

    assert await registry.get_or_restore("forged") is None
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_registry_evicts_least_recently_used(
    provider: FakeAuthProvider, gateway: InMemoryGateway
):
    registry = _registry(provider, gateway, max_workspaces=1)

    first = await registry.get_or_restore("token-admin-1")
    await registry.get_or_restore("token-user-1")

    assert len(registry) == 1
    assert not first.users.active
