"""Entity store — the client-side cache of one table and every gateway call for it.

A store owns the Collection of one entity type. Presentation code reads
from it and calls its operations; nothing else talks to the gateway for
that table. After a single-entity mutation only the changed entity is
patched in place, the collection is never re-fetched.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from agency_admin.application.interfaces import DataGateway, Notifier, Row
from agency_admin.domain.entities import (
    BulkFailure,
    BulkResult,
    MutationResult,
    Notification,
)
from agency_admin.domain.exceptions import (
    EntityNotFoundError,
    EntityValidationError,
    GatewayError,
    PartialWriteError,
)
from agency_admin.infrastructure.logging.store_logger import StoreLogger, StoreOperation

logger = logging.getLogger(__name__)

E = TypeVar("E")
ChangeListener = Callable[[frozenset[str]], None]


class StoreState(str, Enum):
    """Lifecycle of a store's collection."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


def parse_timestamp(value: Any) -> datetime | None:
    """Accept datetimes from the SQL gateway and ISO strings from the REST one."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def as_list(value: Any) -> list:
    if value is None:
        return []
    return list(value)


class EntityStore(ABC, Generic[E]):
    """Generic store for one entity type.

    Subclasses declare the table, ordering and schemas, and map gateway
    rows to domain entities. They may override the ``_fetch`` /
    ``_insert`` / ``_patch`` / ``_delete`` hooks when an entity spans
    more than one table.
    """

    entity_label: str = "Entity"
    table: str = ""
    order_by: str | None = "created_at"
    descending: bool = True
    create_schema: type[BaseModel] | None = None
    update_schema: type[BaseModel] | None = None
    export_columns: tuple[tuple[str, str], ...] = ()  # (header, attribute)

    def __init__(
        self,
        gateway: DataGateway,
        notifier: Notifier | None = None,
        *,
        bulk_concurrency: int = 10,
    ):
        self._gateway = gateway
        self._notifier = notifier
        self._bulk_limit = asyncio.Semaphore(max(1, bulk_concurrency))
        self._items: list[E] = []
        self._state = StoreState.IDLE
        self._error: str | None = None
        self._stale = False
        self._active = True
        self._load_seq = 0
        self._id_locks: dict[str, asyncio.Lock] = {}
        self._listeners: list[ChangeListener] = []
        self._log = StoreLogger(self.table or type(self).__name__)

    # ── Read access ──────────────────────────────────────────────────

    @property
    def items(self) -> list[E]:
        """A shallow copy of the collection, in fetch order."""
        return list(self._items)

    @property
    def ids(self) -> list[str]:
        return [self._entity_id(e) for e in self._items]

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state == StoreState.LOADING

    @property
    def stale(self) -> bool:
        """True when the last load failed and the collection shown is the previous one."""
        return self._stale

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def active(self) -> bool:
        return self._active

    def get(self, entity_id: str) -> E | None:
        index = self._index_of(entity_id)
        return self._items[index] if index is not None else None

    def __len__(self) -> int:
        return len(self._items)

    # ── Change subscription ─────────────────────────────────────────

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener called with the new id set after every collection change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Detach the store; calls still in flight will not touch its state."""
        self._active = False
        self._listeners.clear()

    # ── Operations ──────────────────────────────────────────────────

    async def load(self) -> MutationResult[list[E]]:
        """Fetch the collection. On failure the previous collection is kept and marked stale."""
        self._load_seq += 1
        seq = self._load_seq
        self._state = StoreState.LOADING

        try:
            with self._log.timed_step(StoreOperation.LOAD, f"Loading {self.table}"):
                fetched = await self._fetch()
        except GatewayError as exc:
            if not self._current(seq):
                return MutationResult.fail(exc.message)
            self._state = StoreState.ERRORED
            self._error = exc.message
            self._stale = True
            self._notify(
                f"Error loading {self._plural()}",
                exc.message,
                variant="destructive",
            )
            return MutationResult.fail(exc.message)

        if not self._current(seq):
            return MutationResult.ok(fetched)

        self._items = self._unique(fetched)
        self._state = StoreState.READY
        self._error = None
        self._stale = False
        self._drop_locks_not_in(set(self.ids))
        self._emit_change()
        return MutationResult.ok(self.items)

    async def create(self, fields: dict[str, Any]) -> MutationResult[E]:
        """Insert a new entity; the gateway assigns its id and timestamps."""
        try:
            clean = self._validate(self.create_schema, fields, partial=False)
        except EntityValidationError as exc:
            self._notify(f"Failed to create {self._singular()}", str(exc), variant="destructive")
            return MutationResult.fail(str(exc), reason="validation")

        try:
            with self._log.timed_step(StoreOperation.CREATE, f"Inserting into {self.table}"):
                row = await self._prepare_create(clean)
                entity = await self._insert(row, clean)
        except GatewayError as exc:
            if self._active:
                self._notify(f"Failed to create {self._singular()}", exc.message, variant="destructive")
            return MutationResult.fail(exc.message)

        if not self._active:
            return MutationResult.ok(entity)

        entity_id = self._entity_id(entity)
        index = self._index_of(entity_id)
        if index is None:
            self._items.append(entity)
        else:
            self._items[index] = entity
        self._emit_change()
        self._notify(f"{self.entity_label} created", self._describe(entity))
        return MutationResult.ok(entity)

    async def update(self, entity_id: str, fields: dict[str, Any]) -> MutationResult[E]:
        """Patch one entity and replace it in place with the server's merged row."""
        return await self._update_one(entity_id, fields, notify=True)

    async def remove(self, entity_id: str) -> MutationResult[None]:
        """Delete one entity. Removing an id that is not in the collection is a silent success."""
        return await self._remove_one(entity_id, notify=True)

    async def bulk_update(self, ids: Iterable[str], fields: dict[str, Any]) -> BulkResult:
        """Apply the same patch to every id independently and report per-id outcomes."""
        unique_ids = list(dict.fromkeys(ids))
        try:
            clean = self._validate(self.update_schema, fields, partial=True)
        except EntityValidationError as exc:
            return BulkResult(failed=[BulkFailure(id=i, error=str(exc)) for i in unique_ids])

        async def run(entity_id: str) -> tuple[str, MutationResult]:
            async with self._bulk_limit:
                return entity_id, await self._update_one(
                    entity_id, clean, notify=False, validated=True
                )

        with self._log.timed_step(StoreOperation.BULK, f"Bulk update of {len(unique_ids)} {self.table}"):
            outcomes = await asyncio.gather(*(run(i) for i in unique_ids))
        return self._collect(outcomes)

    async def bulk_remove(self, ids: Iterable[str]) -> BulkResult:
        """Delete every id independently and report per-id outcomes."""
        unique_ids = list(dict.fromkeys(ids))

        async def run(entity_id: str) -> tuple[str, MutationResult]:
            async with self._bulk_limit:
                return entity_id, await self._remove_one(entity_id, notify=False)

        with self._log.timed_step(StoreOperation.BULK, f"Bulk delete of {len(unique_ids)} {self.table}"):
            outcomes = await asyncio.gather(*(run(i) for i in unique_ids))
        return self._collect(outcomes)

    # ── Single-entity internals ─────────────────────────────────────

    async def _update_one(
        self,
        entity_id: str,
        fields: dict[str, Any],
        *,
        notify: bool,
        validated: bool = False,
    ) -> MutationResult[E]:
        async with self._lock_for(entity_id):
            current = self.get(entity_id)
            if current is None:
                error = str(EntityNotFoundError(self.entity_label, entity_id))
                if notify:
                    self._notify(f"Failed to update {self._singular()}", error, variant="destructive")
                return MutationResult.fail(error, reason="not_found")

            try:
                clean = fields if validated else self._validate(self.update_schema, fields, partial=True)
            except EntityValidationError as exc:
                if notify:
                    self._notify(f"Failed to update {self._singular()}", str(exc), variant="destructive")
                return MutationResult.fail(str(exc), reason="validation")

            try:
                with self._log.timed_step(StoreOperation.UPDATE, f"Patching {self.table}", id=entity_id):
                    patch = await self._prepare_update(current, clean)
                    updated = await self._patch(current, patch, clean)
            except GatewayError as exc:
                if isinstance(exc, PartialWriteError) and self._active:
                    await self._resync(current)
                if notify and self._active:
                    self._notify(f"Failed to update {self._singular()}", exc.message, variant="destructive")
                return MutationResult.fail(exc.message)

            if not self._active:
                return MutationResult.ok(updated)

            index = self._index_of(entity_id)
            if index is not None:
                self._items[index] = updated
            if notify:
                self._notify(f"{self.entity_label} updated", self._describe(updated))
            return MutationResult.ok(updated)

    async def _remove_one(self, entity_id: str, *, notify: bool) -> MutationResult[None]:
        async with self._lock_for(entity_id):
            current = self.get(entity_id)
            if current is None:
                return MutationResult.ok()

            try:
                with self._log.timed_step(StoreOperation.DELETE, f"Deleting from {self.table}", id=entity_id):
                    await self._delete(current)
            except GatewayError as exc:
                if notify and self._active:
                    self._notify(f"Failed to delete {self._singular()}", exc.message, variant="destructive")
                return MutationResult.fail(exc.message)

            if not self._active:
                return MutationResult.ok()

            index = self._index_of(entity_id)
            if index is not None:
                del self._items[index]
            self._emit_change()
            if notify:
                self._notify(f"{self.entity_label} deleted", self._describe(current))
        self._id_locks.pop(entity_id, None)
        return MutationResult.ok()

    async def _resync(self, current: E) -> None:
        """Replace one local entity with the server's copy after a partial write."""
        entity_id = self._entity_id(current)
        try:
            server = await self._refetch(current)
        except GatewayError as exc:
            logger.warning(
                "Could not re-read %s '%s' after a partial write: %s", self.table, entity_id, exc.message
            )
            self._stale = True
            return

        if not self._active:
            return
        index = self._index_of(entity_id)
        if index is None:
            return
        if server is None:
            del self._items[index]
            self._emit_change()
        else:
            self._items[index] = server

    # ── Hooks for subclasses ────────────────────────────────────────

    @abstractmethod
    def _to_entity(self, row: Row) -> E:
        """Map a gateway row to a domain entity."""
        ...

    async def _fetch(self) -> list[E]:
        rows = await self._gateway.select(
            self.table, order_by=self.order_by, descending=self.descending
        )
        return [self._map_row(row) for row in rows]

    async def _refetch(self, current: E) -> E | None:
        """Read one entity back from the server; None when it no longer exists."""
        rows = await self._gateway.select(self.table, match={"id": self._entity_id(current)})
        return self._map_row(rows[0]) if rows else None

    async def _prepare_create(self, fields: dict[str, Any]) -> Row:
        return dict(fields)

    async def _prepare_update(self, current: E, fields: dict[str, Any]) -> Row:
        return dict(fields)

    async def _insert(self, row: Row, fields: dict[str, Any]) -> E:
        rows = await self._gateway.insert(self.table, [row])
        if not rows:
            raise GatewayError(500, f"Insert into {self.table} returned no row", "insert")
        return self._map_row(rows[0])

    async def _patch(self, current: E, patch: Row, fields: dict[str, Any]) -> E:
        if not patch:
            return current
        entity_id = self._entity_id(current)
        rows = await self._gateway.update(self.table, {"id": entity_id}, patch)
        if not rows:
            raise GatewayError(404, f"{self.entity_label} '{entity_id}' no longer exists", "update")
        return self._map_row(rows[0])

    async def _delete(self, current: E) -> None:
        await self._gateway.delete(self.table, {"id": self._entity_id(current)})

    def _describe(self, entity: E) -> str:
        return f"{self.entity_label} '{self._entity_id(entity)}'"

    # ── Helpers ─────────────────────────────────────────────────────

    def _map_row(self, row: Row) -> E:
        """`_to_entity` with malformed rows reported as a gateway failure."""
        try:
            return self._to_entity(row)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Malformed %s row: %r", self.table, exc)
            raise GatewayError(
                502, f"Malformed {self._singular()} row from the backend: {exc!r}", f"read {self.table}"
            ) from exc

    @staticmethod
    def _entity_id(entity: Any) -> str:
        return entity.id

    def _index_of(self, entity_id: str) -> int | None:
        for index, entity in enumerate(self._items):
            if self._entity_id(entity) == entity_id:
                return index
        return None

    def _unique(self, entities: list[E]) -> list[E]:
        seen: set[str] = set()
        unique: list[E] = []
        for entity in entities:
            entity_id = self._entity_id(entity)
            if entity_id in seen:
                logger.warning("Duplicate %s id '%s' in fetched rows; keeping the first", self.table, entity_id)
                continue
            seen.add(entity_id)
            unique.append(entity)
        return unique

    def _current(self, seq: int) -> bool:
        """Whether a load that started as `seq` may still write its result."""
        return self._active and seq == self._load_seq

    def _lock_for(self, entity_id: str) -> asyncio.Lock:
        lock = self._id_locks.get(entity_id)
        if lock is None:
            lock = self._id_locks[entity_id] = asyncio.Lock()
        return lock

    def _drop_locks_not_in(self, ids: set[str]) -> None:
        for entity_id in list(self._id_locks):
            if entity_id not in ids and not self._id_locks[entity_id].locked():
                del self._id_locks[entity_id]

    def _validate(
        self, schema: type[BaseModel] | None, fields: dict[str, Any], *, partial: bool
    ) -> dict[str, Any]:
        if schema is None:
            return dict(fields)
        try:
            model = schema.model_validate(fields)
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
                for err in exc.errors()
            ]
            raise EntityValidationError(self.entity_label, errors) from exc
        return model.model_dump(exclude_unset=partial)

    def _collect(self, outcomes: list[tuple[str, MutationResult]]) -> BulkResult:
        result = BulkResult()
        for entity_id, outcome in outcomes:
            if outcome.success:
                result.succeeded.append(entity_id)
            else:
                result.failed.append(BulkFailure(id=entity_id, error=outcome.error or "Unknown error"))
        logger.info(
            "Bulk %s: %d succeeded, %d failed",
            self.table,
            len(result.succeeded),
            len(result.failed),
        )
        return result

    def _emit_change(self) -> None:
        ids = frozenset(self.ids)
        for listener in list(self._listeners):
            listener(ids)

    def _notify(self, title: str, description: str = "", *, variant: str = "success") -> None:
        if self._notifier is None:
            return
        self._notifier.notify(Notification(title=title, description=description, variant=variant))

    def _singular(self) -> str:
        return self.entity_label.lower()

    def _plural(self) -> str:
        return f"{self._singular()}s"
