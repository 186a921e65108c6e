"""REST data gateway — implements DataGateway and AuthProvider over HTTP.

Talks to a hosted backend exposing a PostgREST-style table API under
`/rest/v1`, serverless functions under `/functions/v1` and a GoTrue-style
auth API under `/auth/v1`. Row-level security on the backend decides what
the caller's access token may read or write.
"""

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter

from agency_admin.application.interfaces import AuthProvider, DataGateway, Row
from agency_admin.domain.entities import AuthSession, AuthUser
from agency_admin.domain.exceptions import GatewayError

logger = logging.getLogger(__name__)

_json_adapter: TypeAdapter[Any] = TypeAdapter(Any)


def to_json(value: Any) -> Any:
    """Encode datetimes and other rich values the way the table API expects."""
    return _json_adapter.dump_python(value, mode="json")


def filter_value(value: Any) -> str:
    """Render one equality filter in `column=op.value` form."""
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class _RestClientBase:
    """Shared header, client and error handling for the REST adapters."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        *,
        access_token: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._anon_key = anon_key
        self._access_token = access_token
        self._http_client = http_client
        self._timeout = timeout

    def _get_headers(self, access_token: str | None = None) -> dict[str, str]:
        token = access_token or self._access_token or self._anon_key
        return {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.request(
                method,
                f"{self._base_url}{path}",
                params=params,
                json=json,
                headers=headers or self._get_headers(),
            )
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise GatewayError(0, f"Could not reach the backend: {e}", operation) from e
        finally:
            if should_close:
                await client.aclose()

        if response.status_code >= 400:
            self._raise_gateway_error(response, operation)
        return response

    @staticmethod
    def _raise_gateway_error(response: httpx.Response, operation: str) -> None:
        """Raise GatewayError from a non-2xx httpx Response."""
        try:
            data = response.json()
            message = (
                data.get("message")
                or data.get("error_description")
                or data.get("msg")
                or data.get("error")
                or response.text
            )
        except Exception:
            message = response.text

        logger.debug("%s rejected with %d: %s", operation, response.status_code, message)
        raise GatewayError(response.status_code, str(message), operation)

    @staticmethod
    def _json_body(response: httpx.Response, operation: str) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning("%s returned a non-JSON body: %s", operation, e)
            raise GatewayError(502, "Backend returned an invalid JSON body", operation) from e


class RestDataGateway(_RestClientBase, DataGateway):
    """Infrastructure adapter — table CRUD and function calls over the REST API."""

    def _table_headers(self) -> dict[str, str]:
        return {**self._get_headers(), "Prefer": "return=representation"}

    @staticmethod
    def _filters(match: dict[str, Any] | None) -> dict[str, str]:
        return {column: filter_value(value) for column, value in (match or {}).items()}

    async def select(
        self,
        table: str,
        *,
        match: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        params = {"select": "*", **self._filters(match)}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"

        response = await self._request(
            "GET", f"/rest/v1/{table}", f"select {table}", params=params
        )
        return self._json_body(response, f"select {table}") or []

    async def insert(self, table: str, rows: list[Row]) -> list[Row]:
        response = await self._request(
            "POST",
            f"/rest/v1/{table}",
            f"insert {table}",
            json=to_json(rows),
            headers=self._table_headers(),
        )
        return self._json_body(response, f"insert {table}") or []

    async def update(self, table: str, match: dict[str, Any], patch: Row) -> list[Row]:
        if not match:
            raise GatewayError(400, "Refusing to update without a filter", f"update {table}")
        response = await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            f"update {table}",
            params=self._filters(match),
            json=to_json(patch),
            headers=self._table_headers(),
        )
        return self._json_body(response, f"update {table}") or []

    async def delete(self, table: str, match: dict[str, Any]) -> list[Row]:
        if not match:
            raise GatewayError(400, "Refusing to delete without a filter", f"delete {table}")
        response = await self._request(
            "DELETE",
            f"/rest/v1/{table}",
            f"delete {table}",
            params=self._filters(match),
            headers=self._table_headers(),
        )
        return self._json_body(response, f"delete {table}") or []

    async def invoke(self, function: str, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self._request(
            "POST",
            f"/functions/v1/{function}",
            f"invoke {function}",
            json=to_json(payload),
        )
        return self._json_body(response, f"invoke {function}") or {}


class RestAuthProvider(_RestClientBase, AuthProvider):
    """Infrastructure adapter — password sign-in and session lookup."""

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        response = await self._request(
            "POST",
            "/auth/v1/token",
            "sign in",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        data = self._json_body(response, "sign in") or {}
        if not data.get("access_token"):
            raise GatewayError(502, "Auth response did not include an access token", "sign in")
        return AuthSession(
            user=self._parse_user(data.get("user") or {}),
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
        )

    async def get_user(self, access_token: str) -> AuthUser:
        response = await self._request(
            "GET",
            "/auth/v1/user",
            "get user",
            headers=self._get_headers(access_token),
        )
        return self._parse_user(self._json_body(response, "get user") or {})

    async def sign_out(self, access_token: str) -> None:
        await self._request(
            "POST",
            "/auth/v1/logout",
            "sign out",
            headers=self._get_headers(access_token),
        )

    @staticmethod
    def _parse_user(data: dict[str, Any]) -> AuthUser:
        if not data.get("id"):
            raise GatewayError(502, "Auth response did not include a user", "parse user")
        return AuthUser(id=str(data["id"]), email=data.get("email") or "")
