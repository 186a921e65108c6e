"""Abstract remote data gateway interface — port for the hosted backend.

The back-office never talks to a database or HTTP API directly; every
table read/write and serverless function call goes through this port.
"""

from abc import ABC, abstractmethod
from typing import Any

Row = dict[str, Any]


class DataGateway(ABC):
    """Port — table-scoped CRUD plus invokable serverless functions."""

    @abstractmethod
    async def select(
        self,
        table: str,
        *,
        match: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        """Return rows of `table` whose columns equal every value in `match`.

        Raises:
            GatewayError: If the backend rejects or fails the call.
        """
        ...

    @abstractmethod
    async def insert(self, table: str, rows: list[Row]) -> list[Row]:
        """Insert rows and return them as stored (ids and timestamps assigned)."""
        ...

    @abstractmethod
    async def update(self, table: str, match: dict[str, Any], patch: Row) -> list[Row]:
        """Apply `patch` to the matching rows and return them as stored."""
        ...

    @abstractmethod
    async def delete(self, table: str, match: dict[str, Any]) -> list[Row]:
        """Delete the matching rows and return what was removed."""
        ...

    @abstractmethod
    async def invoke(self, function: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Call a serverless function by name and return its JSON body."""
        ...
