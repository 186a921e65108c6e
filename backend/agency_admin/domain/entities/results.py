"""Result value objects returned by stores and bulk actions.

Gateway failures never escape a store as exceptions; they are reported
through these shapes so callers can present them to the user.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class MutationResult(Generic[T]):
    """Outcome of a single load / create / update / remove call."""

    success: bool
    data: T | None = None
    error: str | None = None
    reason: str | None = None  # "validation" | "not_found" | "gateway"

    @classmethod
    def ok(cls, data: T | None = None) -> "MutationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, reason: str = "gateway") -> "MutationResult[T]":
        return cls(success=False, error=error, reason=reason)


@dataclass
class BulkFailure:
    id: str
    error: str


@dataclass
class BulkResult:
    """Per-id outcome of a bulk mutation. A partial failure is data, not an exception."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[BulkFailure] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.succeeded) and bool(self.failed)


@dataclass
class BulkOutcome:
    """Consolidated report of a bulk action for user feedback."""

    success_count: int
    failure_count: int
    errors: list[BulkFailure] = field(default_factory=list)
    payload: Any = None  # e.g. CSV text for an export action


@dataclass(frozen=True)
class Notification:
    """Toast-shaped message for the notification surface."""

    title: str
    description: str = ""
    variant: str = "success"  # "success" | "destructive"
