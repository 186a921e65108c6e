"""In-memory fakes of the gateway, auth and notification ports shared by the tests."""

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from agency_admin.application.interfaces import AuthProvider, DataGateway, Notifier, Row
from agency_admin.domain.entities import AuthSession, AuthUser, Notification
from agency_admin.domain.exceptions import GatewayError

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)

CallHook = Callable[[str, str, dict[str, Any]], Awaitable[None]]


def _matches(row: Row, match: dict[str, Any] | None) -> bool:
    return all(row.get(column) == value for column, value in (match or {}).items())


class InMemoryGateway(DataGateway):
    """Dict-backed fake with per-call failure injection and a call log."""

    def __init__(self, tables: dict[str, list[Row]] | None = None):
        self.tables: dict[str, list[Row]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self.functions: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.hook: CallHook | None = None
        self._failures: list[tuple[str, str, dict[str, Any], GatewayError]] = []
        self._clock = 0

    def fail(
        self,
        operation: str,
        table: str,
        *,
        match: dict[str, Any] | None = None,
        status_code: int = 500,
        message: str = "Gateway unavailable",
    ) -> None:
        """Make every matching call raise GatewayError until `clear_failures()`."""
        self._failures.append(
            (operation, table, match or {}, GatewayError(status_code, message, operation))
        )

    def clear_failures(self) -> None:
        self._failures.clear()

    def count(self, operation: str, table: str | None = None) -> int:
        return sum(
            1 for op, name, _ in self.calls if op == operation and (table is None or name == table)
        )

    async def _enter(self, operation: str, table: str, match: dict[str, Any]) -> None:
        self.calls.append((operation, table, dict(match)))
        if self.hook is not None:
            await self.hook(operation, table, match)
        for op, name, wanted, error in self._failures:
            if op == operation and name == table and _matches(match, wanted):
                raise error

    def _now(self) -> datetime:
        self._clock += 1
        return _EPOCH + timedelta(seconds=self._clock)

    async def select(
        self,
        table: str,
        *,
        match: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        await self._enter("select", table, match or {})
        rows = [dict(row) for row in self.tables.get(table, []) if _matches(row, match)]
        if order_by:
            rows.sort(key=lambda row: str(row.get(order_by) or ""), reverse=descending)
        return rows

    async def insert(self, table: str, rows: list[Row]) -> list[Row]:
        first = rows[0] if rows else {}
        await self._enter("insert", table, first)
        stored = []
        for row in rows:
            now = self._now()
            record = {"created_at": now, "updated_at": now, **row}
            record.setdefault("id", f"{table}-{self._clock}")
            self.tables.setdefault(table, []).append(record)
            stored.append(dict(record))
        return stored

    async def update(self, table: str, match: dict[str, Any], patch: Row) -> list[Row]:
        await self._enter("update", table, match)
        updated = []
        for row in self.tables.get(table, []):
            if _matches(row, match):
                row.update(patch)
                row["updated_at"] = self._now()
                updated.append(dict(row))
        return updated

    async def delete(self, table: str, match: dict[str, Any]) -> list[Row]:
        await self._enter("delete", table, match)
        kept, removed = [], []
        for row in self.tables.get(table, []):
            (removed if _matches(row, match) else kept).append(row)
        self.tables[table] = kept
        return removed

    async def invoke(self, function: str, payload: dict[str, Any]) -> dict[str, Any]:
        await self._enter("invoke", function, payload)
        handler = self.functions.get(function)
        if handler is None:
            raise GatewayError(404, f"Function '{function}' not found", "invoke")
        return handler(payload)


class CollectingNotifier(Notifier):
    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def destructive(self) -> list[Notification]:
        return [n for n in self.notifications if n.variant == "destructive"]


class FakeAuthProvider(AuthProvider):
    """Accepts the registered credentials and hands out `token-<user id>` tokens."""

    def __init__(self) -> None:
        self._accounts: dict[str, tuple[str, AuthUser]] = {}
        self._tokens: dict[str, AuthUser] = {}
        self.signed_out: list[str] = []

    def register(self, user_id: str, email: str, password: str = "secret") -> str:
        user = AuthUser(id=user_id, email=email)
        self._accounts[email] = (password, user)
        token = f"token-{user_id}"
        self._tokens[token] = user
        return token

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        account = self._accounts.get(email)
        if account is None or account[0] != password:
            raise GatewayError(400, "Invalid login credentials", "sign in")
        user = account[1]
        return AuthSession(user=user, access_token=f"token-{user.id}")

    async def get_user(self, access_token: str) -> AuthUser:
        user = self._tokens.get(access_token)
        if user is None:
            raise GatewayError(401, "Invalid JWT", "get user")
        return user

    async def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)
        self._tokens.pop(access_token, None)


def profile_row(user_id: str, email: str, role: str = "user", **extra: Any) -> Row:
    return {
        "id": user_id,
        "email": email,
        "full_name": extra.pop("full_name", None),
        "role": role,
        "created_at": extra.pop("created_at", "2024-01-01T00:00:00+00:00"),
        **extra,
    }
