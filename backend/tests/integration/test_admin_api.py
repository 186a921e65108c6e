"""API tests for the admin list-management, auth and contact endpoints.

The app runs against in-memory fakes of the gateway and auth ports,
injected through FastAPI dependency overrides.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from agency_admin.application.services import (
    AdminWorkspace,
    AuthService,
    ContactService,
    WorkspaceRegistry,
)
from agency_admin.application.services.contact_service import CONTACT_FUNCTION
from agency_admin.infrastructure.dependencies import (
    get_contact_service,
    get_gateway_factory,
    get_workspace_registry,
)
from agency_admin.main import app
from tests.fakes import FakeAuthProvider, InMemoryGateway, profile_row

ADMIN = {"Authorization": "Bearer token-3"}
USER = {"Authorization": "Bearer token-1"}


class StubGatewayFactory:
    def __init__(self, provider: FakeAuthProvider):
        self._provider = provider

    def auth_provider(self) -> FakeAuthProvider:
        return self._provider


@pytest.fixture
def gateway() -> InMemoryGateway:
    gateway = InMemoryGateway(
        {
            "profiles": [
                profile_row("1", "ann@example.com", created_at="2024-03-03T00:00:00+00:00"),
                profile_row("2", "bob@example.com", created_at="2024-03-02T00:00:00+00:00"),
                profile_row("3", "cat@example.com", "admin", created_at="2024-03-01T00:00:00+00:00"),
            ],
            "contact_submissions": [
                {"id": "s1", "name": "Jane", "email": "jane@example.com", "message": "Hi",
                 "status": "new", "created_at": "2024-03-01T00:00:00+00:00"},
                {"id": "s2", "name": "Tom", "email": "tom@example.com", "message": "Hello",
                 "status": "closed", "created_at": "2024-03-02T00:00:00+00:00"},
            ],
        }
    )
    gateway.functions[CONTACT_FUNCTION] = lambda payload: {
        "success": True,
        "message": "Contact submission received successfully",
    }
    return gateway


@pytest.fixture
def provider() -> FakeAuthProvider:
    provider = FakeAuthProvider()
    provider.register("1", "ann@example.com")
    provider.register("3", "cat@example.com")
    return provider


@pytest.fixture
def registry(gateway: InMemoryGateway, provider: FakeAuthProvider) -> WorkspaceRegistry:
    return WorkspaceRegistry(
        lambda token: AdminWorkspace(gateway, AuthService(provider, gateway))
    )


@pytest.fixture(autouse=True)
def overrides(gateway: InMemoryGateway, provider: FakeAuthProvider, registry: WorkspaceRegistry):
    app.dependency_overrides[get_workspace_registry] = lambda: registry
    app.dependency_overrides[get_gateway_factory] = lambda: StubGatewayFactory(provider)
    app.dependency_overrides[get_contact_service] = lambda: ContactService(gateway)
    yield
    app.dependency_overrides.clear()


def _client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


# ── Access control ──


@pytest.mark.asyncio
async def test_admin_routes_require_bearer_token():
    async with _client() as client:
        response = await client.get("/api/v1/admin/users")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_routes_reject_invalid_token():
    async with _client() as client:
        response = await client.get("/api/v1/admin/users", headers={"Authorization": "Bearer forged"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_routes_require_admin_role():
    async with _client() as client:
        response = await client.get("/api/v1/admin/users", headers=USER)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unknown_collection_is_404():
    async with _client() as client:
        response = await client.get("/api/v1/admin/widgets", headers=ADMIN)
    assert response.status_code == 404


# ── Listing, filtering, selection ──


@pytest.mark.asyncio
async def test_list_loads_collection_on_first_access():
    async with _client() as client:
        response = await client.get("/api/v1/admin/users", headers=ADMIN)

    assert response.status_code == 200
    data = response.json()
    assert [item["id"] for item in data["items"]] == ["1", "2", "3"]
    assert data["total"] == 3
    assert data["state"] == "ready"
    assert data["stale"] is False
    assert data["select_all_state"] == "none"


@pytest.mark.asyncio
async def test_select_all_selects_only_filtered_rows():
    async with _client() as client:
        listed = await client.get("/api/v1/admin/users", params={"role": "admin"}, headers=ADMIN)
        selected = await client.post("/api/v1/admin/users/selection", headers=ADMIN)

    assert [item["id"] for item in listed.json()["items"]] == ["3"]
    assert selected.json()["selected_ids"] == ["3"]
    assert selected.json()["select_all_state"] == "all"


@pytest.mark.asyncio
async def test_search_and_all_constraint():
    async with _client() as client:
        response = await client.get(
            "/api/v1/admin/users", params={"search": "BOB", "role": "all"}, headers=ADMIN
        )

    data = response.json()
    assert [item["id"] for item in data["items"]] == ["2"]
    assert data["visible_count"] == 1
    assert data["total"] == 3


@pytest.mark.asyncio
async def test_toggle_and_clear_selection():
    async with _client() as client:
        on = await client.post("/api/v1/admin/users/selection/2", headers=ADMIN)
        off = await client.post("/api/v1/admin/users/selection/2", headers=ADMIN)
        unknown = await client.post("/api/v1/admin/users/selection/42", headers=ADMIN)
        await client.post("/api/v1/admin/users/selection/1", headers=ADMIN)
        cleared = await client.delete("/api/v1/admin/users/selection", headers=ADMIN)

    assert on.json()["selected_ids"] == ["2"]
    assert on.json()["select_all_state"] == "some"
    assert off.json()["selected_ids"] == []
    assert unknown.status_code == 404
    assert cleared.json()["selected_ids"] == []


# ── Bulk actions ──


@pytest.mark.asyncio
async def test_bulk_update_partial_failure_keeps_failed_id_selected(gateway: InMemoryGateway):
    gateway.fail("update", "profiles", match={"id": "2"}, status_code=403, message="permission denied")

    async with _client() as client:
        await client.post("/api/v1/admin/users/selection", headers=ADMIN)
        response = await client.post(
            "/api/v1/admin/users/bulk",
            json={"action": "update", "fields": {"role": "admin"}},
            headers=ADMIN,
        )
        listed = await client.get("/api/v1/admin/users", headers=ADMIN)
        notifications = await client.get("/api/v1/admin/notifications", headers=ADMIN)
        drained = await client.get("/api/v1/admin/notifications", headers=ADMIN)

    outcome = response.json()
    assert outcome["success_count"] == 2
    assert outcome["failure_count"] == 1
    assert outcome["errors"] == [{"id": "2", "error": "permission denied"}]
    assert outcome["selected_ids"] == ["2"]
    assert [item["role"] for item in listed.json()["items"]] == ["admin", "user", "admin"]
    assert [n["title"] for n in notifications.json()] == ["Bulk update partially failed"]
    assert drained.json() == []


@pytest.mark.asyncio
async def test_bulk_export_returns_csv():
    async with _client() as client:
        await client.post("/api/v1/admin/users/selection", headers=ADMIN)
        response = await client.post(
            "/api/v1/admin/users/bulk", json={"action": "export"}, headers=ADMIN
        )

    payload = response.json()["payload"]
    assert payload.splitlines()[0] == "Email,Full Name,Role,Created At"
    assert len(payload.splitlines()) == 4


@pytest.mark.asyncio
async def test_bulk_rejects_unknown_action():
    async with _client() as client:
        response = await client.post(
            "/api/v1/admin/users/bulk", json={"action": "archive"}, headers=ADMIN
        )
    assert response.status_code == 422


# ── CRUD ──


@pytest.mark.asyncio
async def test_create_post_returns_server_assigned_id():
    async with _client() as client:
        created = await client.post(
            "/api/v1/admin/posts", json={"title": "Draft Post", "status": "draft"}, headers=ADMIN
        )
        listed = await client.get("/api/v1/admin/posts", headers=ADMIN)

    assert created.status_code == 201
    post = created.json()
    assert post["id"]
    assert post["status"] == "draft"
    assert post["author_id"] == "3"
    assert listed.json()["total"] == 1


@pytest.mark.asyncio
async def test_create_with_invalid_fields_is_422(gateway: InMemoryGateway):
    async with _client() as client:
        response = await client.post("/api/v1/admin/users", json={"email": "bad"}, headers=ADMIN)

    assert response.status_code == 422
    assert gateway.count("insert") == 0


@pytest.mark.asyncio
async def test_update_entity_and_unknown_id():
    async with _client() as client:
        updated = await client.patch(
            "/api/v1/admin/users/2", json={"full_name": "Bob Baker"}, headers=ADMIN
        )
        missing = await client.patch("/api/v1/admin/users/99", json={"role": "admin"}, headers=ADMIN)

    assert updated.status_code == 200
    assert updated.json()["full_name"] == "Bob Baker"
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_delete_is_idempotent():
    async with _client() as client:
        first = await client.delete("/api/v1/admin/users/2", headers=ADMIN)
        second = await client.delete("/api/v1/admin/users/2", headers=ADMIN)
        absent = await client.delete("/api/v1/admin/users/5", headers=ADMIN)
        listed = await client.get("/api/v1/admin/users", headers=ADMIN)

    assert (first.status_code, second.status_code, absent.status_code) == (204, 204, 204)
    assert [item["id"] for item in listed.json()["items"]] == ["1", "3"]


@pytest.mark.asyncio
async def test_gateway_failure_is_502(gateway: InMemoryGateway):
    gateway.fail("update", "profiles", message="timeout")

    async with _client() as client:
        response = await client.patch("/api/v1/admin/users/1", json={"role": "editor"}, headers=ADMIN)

    assert response.status_code == 502
    assert response.json()["detail"] == "timeout"


@pytest.mark.asyncio
async def test_failed_reload_keeps_rows_and_flags_stale(gateway: InMemoryGateway):
    async with _client() as client:
        await client.get("/api/v1/admin/users", headers=ADMIN)
        gateway.fail("select", "profiles", message="Service unavailable")
        response = await client.post("/api/v1/admin/users/reload", headers=ADMIN)

    data = response.json()
    assert response.status_code == 200
    assert data["stale"] is True
    assert data["state"] == "errored"
    assert data["error"] == "Service unavailable"
    assert data["total"] == 3


@pytest.mark.asyncio
async def test_dashboard_stats():
    async with _client() as client:
        response = await client.get("/api/v1/admin/dashboard/stats", headers=ADMIN)

    data = response.json()
    assert data["users_by_role"]["admin"] == 1
    assert data["users_by_role"]["user"] == 2
    assert data["demo"] is None


# ── Auth ──


@pytest.mark.asyncio
async def test_sign_in_session_and_sign_out(provider: FakeAuthProvider):
    async with _client() as client:
        signed_in = await client.post(
            "/api/v1/auth/sign-in", json={"email": "cat@example.com", "password": "secret"}
        )
        session = await client.get("/api/v1/auth/session", headers=ADMIN)
        signed_out = await client.post("/api/v1/auth/sign-out", headers=ADMIN)
        after = await client.get("/api/v1/admin/users", headers=ADMIN)

    assert signed_in.status_code == 200
    assert signed_in.json()["access_token"] == "token-3"
    assert signed_in.json()["role"] == "admin"
    assert session.json()["email"] == "cat@example.com"
    assert signed_out.status_code == 204
    assert provider.signed_out == ["token-3"]
    assert after.status_code == 401


@pytest.mark.asyncio
async def test_sign_in_with_bad_password_is_401():
    async with _client() as client:
        response = await client.post(
            "/api/v1/auth/sign-in", json={"email": "cat@example.com", "password": "wrong"}
        )
    assert response.status_code == 401


# ── Contact ──


@pytest.mark.asyncio
async def test_contact_form_submission(gateway: InMemoryGateway):
    async with _client() as client:
        response = await client.post(
            "/api/v1/contact",
            json={"name": "Jane", "email": "jane@example.com", "message": "Hello"},
        )

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert gateway.count("invoke", CONTACT_FUNCTION) == 1


@pytest.mark.asyncio
async def test_contact_form_validation():
    async with _client() as client:
        response = await client.post(
            "/api/v1/contact", json={"name": "Jane", "email": "nope", "message": "Hello"}
        )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_contact_inbox_filters_by_status():
    async with _client() as client:
        unanswered = await client.get(
            "/api/v1/admin/contact-submissions", params={"status": "new"}, headers=ADMIN
        )
        found = await client.get(
            "/api/v1/admin/contact-submissions", params={"search": "tom@"}, headers=ADMIN
        )

    assert [item["id"] for item in unanswered.json()["items"]] == ["s1"]
    assert unanswered.json()["total"] == 2
    assert [item["id"] for item in found.json()["items"]] == ["s2"]


@pytest.mark.asyncio
async def test_contact_inbox_triage_update(gateway: InMemoryGateway):
    async with _client() as client:
        updated = await client.patch(
            "/api/v1/admin/contact-submissions/s1",
            json={"status": "replied", "admin_notes": "Sent a quote"},
            headers=ADMIN,
        )
        invalid = await client.patch(
            "/api/v1/admin/contact-submissions/s1", json={"status": "spam"}, headers=ADMIN
        )

    assert updated.status_code == 200
    assert updated.json()["status"] == "replied"
    assert updated.json()["admin_notes"] == "Sent a quote"
    assert invalid.status_code == 422
    assert gateway.tables["contact_submissions"][0]["status"] == "replied"
