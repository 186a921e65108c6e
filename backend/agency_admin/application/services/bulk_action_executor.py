"""Bulk action executor — applies one action to every selected id and reports the outcome."""

import csv
import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from agency_admin.application.interfaces import Notifier
from agency_admin.application.services.entity_store import EntityStore
from agency_admin.application.services.selection_controller import SelectionController
from agency_admin.domain.entities import (
    BulkFailure,
    BulkOutcome,
    BulkResult,
    Notification,
)

logger = logging.getLogger(__name__)

BULK_ACTIONS = ("update", "delete", "export")


@dataclass(frozen=True)
class BulkAction:
    """An action applied to every id of a selection."""

    kind: str  # "update" | "delete" | "export"
    fields: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.kind not in BULK_ACTIONS:
            raise ValueError(f"Unknown bulk action '{self.kind}'")

    @classmethod
    def update(cls, **fields: Any) -> "BulkAction":
        return cls(kind="update", fields=fields)

    @classmethod
    def delete(cls) -> "BulkAction":
        return cls(kind="delete")

    @classmethod
    def export(cls) -> "BulkAction":
        return cls(kind="export")


class BulkActionExecutor:
    """Runs bulk actions through a store and reconciles the selection afterwards.

    Every id is processed independently; a failing row never stops the
    others. Succeeded ids are removed from the selection and failed ids
    stay selected so they can be retried.
    """

    def __init__(
        self,
        store: EntityStore[Any],
        selection: SelectionController,
        notifier: Notifier | None = None,
    ):
        self._store = store
        self._selection = selection
        self._notifier = notifier

    async def execute(self, action: BulkAction, ids: Iterable[str] | None = None) -> BulkOutcome:
        """Apply `action` to `ids` (the current selection when omitted)."""
        target = self._ordered(self._selection.selected if ids is None else ids)
        if not target:
            return BulkOutcome(success_count=0, failure_count=0)

        payload = None
        if action.kind == "update":
            result = await self._store.bulk_update(target, action.fields)
        elif action.kind == "delete":
            result = await self._store.bulk_remove(target)
        else:
            result, payload = self._export(target)

        self._selection.deselect(result.succeeded)
        outcome = BulkOutcome(
            success_count=len(result.succeeded),
            failure_count=len(result.failed),
            errors=list(result.failed),
            payload=payload,
        )
        logger.info(
            "Bulk %s on %s: %d succeeded, %d failed",
            action.kind,
            self._store.table,
            outcome.success_count,
            outcome.failure_count,
        )
        self._notify(action, outcome)
        return outcome

    def _ordered(self, ids: Iterable[str]) -> list[str]:
        """Collection order first, then ids unknown to the collection."""
        wanted = list(dict.fromkeys(ids))
        position = {entity_id: index for index, entity_id in enumerate(self._store.ids)}
        return sorted(wanted, key=lambda i: position.get(i, len(position)))

    def _export(self, ids: list[str]) -> tuple[BulkResult, str]:
        result = BulkResult()
        columns = self._store.export_columns
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow([header for header, _ in columns])

        for entity_id in ids:
            entity = self._store.get(entity_id)
            if entity is None:
                result.failed.append(BulkFailure(id=entity_id, error="Not in the current list"))
                continue
            writer.writerow([_csv_value(getattr(entity, attr, None)) for _, attr in columns])
            result.succeeded.append(entity_id)

        return result, buffer.getvalue()

    def _notify(self, action: BulkAction, outcome: BulkOutcome) -> None:
        if self._notifier is None:
            return

        verb = action.kind
        label = self._store.entity_label.lower()
        if outcome.failure_count == 0:
            notification = Notification(
                title=f"Bulk {verb} successful",
                description=f"{outcome.success_count} {label}(s) processed.",
            )
        elif outcome.success_count == 0:
            notification = Notification(
                title=f"Bulk {verb} failed",
                description=outcome.errors[0].error,
                variant="destructive",
            )
        else:
            notification = Notification(
                title=f"Bulk {verb} partially failed",
                description=(
                    f"{outcome.success_count} succeeded, {outcome.failure_count} failed. "
                    "Failed items remain selected."
                ),
                variant="destructive",
            )
        self._notifier.notify(notification)


def _csv_value(value: Any) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, (list, tuple)):
        return "; ".join(str(v) for v in value)
    return str(value)
