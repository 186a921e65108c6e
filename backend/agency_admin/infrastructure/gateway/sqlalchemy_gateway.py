"""Self-hosted data gateway — implements DataGateway with SQLAlchemy async sessions.

Each call runs in its own session and commits before returning, so the
gateway behaves like the hosted table API: one request, one transaction.
Serverless functions are replaced by a registry of local async handlers.
"""

import logging
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agency_admin.application.interfaces import DataGateway, Row
from agency_admin.domain.exceptions import GatewayError
from agency_admin.infrastructure.database.base import Base
from agency_admin.infrastructure.database.models import TABLE_MODELS

logger = logging.getLogger(__name__)

LocalFunction = Callable[[AsyncSession, dict[str, Any]], Awaitable[dict[str, Any]]]


class SQLAlchemyDataGateway(DataGateway):
    """Infrastructure adapter — table CRUD against a relational database."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        functions: dict[str, LocalFunction] | None = None,
    ):
        self._session_factory = session_factory
        self._functions = dict(functions or {})

    async def select(
        self,
        table: str,
        *,
        match: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        model = self._model(table, "select")
        stmt = self._where(select(model), model, match, "select")
        if order_by:
            column = self._column(model, order_by, "select")
            stmt = stmt.order_by(column.desc() if descending else column.asc())

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
            except SQLAlchemyError as e:
                raise self._translate(e, f"select {table}") from e
            return [self._to_row(obj) for obj in result.scalars().all()]

    async def insert(self, table: str, rows: list[Row]) -> list[Row]:
        model = self._model(table, "insert")
        objects = []
        for row in rows:
            values = self._coerce(model, row, "insert")
            values.setdefault("id", str(uuid.uuid4()))
            objects.append(model(**values))

        async with self._session_factory() as session:
            try:
                session.add_all(objects)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise self._translate(e, f"insert {table}") from e
            logger.debug("Inserted %d row(s) into %s", len(objects), table)
            return [self._to_row(obj) for obj in objects]

    async def update(self, table: str, match: dict[str, Any], patch: Row) -> list[Row]:
        model = self._model(table, "update")
        if not match:
            raise GatewayError(400, "Refusing to update without a filter", f"update {table}")
        values = self._coerce(model, patch, "update")
        values.pop("id", None)

        async with self._session_factory() as session:
            try:
                result = await session.execute(self._where(select(model), model, match, "update"))
                objects = list(result.scalars().all())
                for obj in objects:
                    for key, value in values.items():
                        setattr(obj, key, value)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise self._translate(e, f"update {table}") from e
            return [self._to_row(obj) for obj in objects]

    async def delete(self, table: str, match: dict[str, Any]) -> list[Row]:
        model = self._model(table, "delete")
        if not match:
            raise GatewayError(400, "Refusing to delete without a filter", f"delete {table}")

        async with self._session_factory() as session:
            try:
                result = await session.execute(self._where(select(model), model, match, "delete"))
                objects = list(result.scalars().all())
                removed = [self._to_row(obj) for obj in objects]
                for obj in objects:
                    await session.delete(obj)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise self._translate(e, f"delete {table}") from e
            return removed

    async def invoke(self, function: str, payload: dict[str, Any]) -> dict[str, Any]:
        handler = self._functions.get(function)
        if handler is None:
            raise GatewayError(404, f"Function '{function}' is not registered", f"invoke {function}")

        async with self._session_factory() as session:
            try:
                result = await handler(session, payload)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise self._translate(e, f"invoke {function}") from e
            return result

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _model(table: str, operation: str) -> type[Base]:
        model = TABLE_MODELS.get(table)
        if model is None:
            raise GatewayError(404, f"Unknown table '{table}'", f"{operation} {table}")
        return model

    @staticmethod
    def _column(model: type[Base], name: str, operation: str):
        columns = model.__table__.columns
        if name not in columns:
            raise GatewayError(
                400,
                f"Column '{name}' does not exist on '{model.__tablename__}'",
                f"{operation} {model.__tablename__}",
            )
        return getattr(model, name)

    def _where(self, stmt, model: type[Base], match: dict[str, Any] | None, operation: str):
        for name, value in (match or {}).items():
            column = self._column(model, name, operation)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        return stmt

    def _coerce(self, model: type[Base], row: Row, operation: str) -> dict[str, Any]:
        """Validate column names and parse ISO timestamps for DateTime columns."""
        values: dict[str, Any] = {}
        for name, value in row.items():
            self._column(model, name, operation)
            column = model.__table__.columns[name]
            if isinstance(column.type, DateTime) and isinstance(value, str):
                try:
                    value = datetime.fromisoformat(value.replace("Z", "+00:00"))
                except ValueError as e:
                    raise GatewayError(
                        400, f"Invalid timestamp for '{name}': {value}", operation
                    ) from e
            values[name] = value
        return values

    @staticmethod
    def _to_row(obj: Base) -> Row:
        row: Row = {}
        for column in obj.__table__.columns:
            value = getattr(obj, column.key)
            # SQLite drops tzinfo on the way back
            if isinstance(value, datetime) and value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            row[column.key] = value
        return row

    @staticmethod
    def _translate(error: SQLAlchemyError, operation: str) -> GatewayError:
        if isinstance(error, IntegrityError):
            message = str(error.orig) if error.orig is not None else str(error)
            logger.info("%s violated a constraint: %s", operation, message)
            return GatewayError(409, message, operation)
        logger.error("%s failed: %s", operation, error)
        return GatewayError(500, str(error), operation)
