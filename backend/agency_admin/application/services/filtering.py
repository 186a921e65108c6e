"""Filter predicates and the pure visible-subset derivation used by list screens."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

E = TypeVar("E")

# Constraint values that mean "no constraint" (e.g. an "All roles" dropdown)
UNSET_VALUES = (None, "", "all")


@dataclass(frozen=True)
class FilterPredicate:
    """A free-text search term plus categorical constraints (field → value)."""

    search: str = ""
    constraints: Mapping[str, Any] = field(default_factory=dict)

    @property
    def active_constraints(self) -> dict[str, Any]:
        return {k: v for k, v in self.constraints.items() if v not in UNSET_VALUES}

    @property
    def is_empty(self) -> bool:
        return not self.search.strip() and not self.active_constraints


def _equals(actual: Any, expected: Any) -> bool:
    if actual == expected:
        return True
    # Query-string values arrive as text: "admin", "true", "42"
    return isinstance(expected, str) and str(actual).lower() == expected.lower()


def matches(
    entity: Any,
    predicate: FilterPredicate,
    *,
    search_fields: Iterable[str],
    relation_fields: Iterable[str] = (),
) -> bool:
    """Whether one entity passes the predicate."""
    term = predicate.search.strip().lower()
    if term:
        found = False
        for name in search_fields:
            value = getattr(entity, name, None)
            if value is not None and term in str(value).lower():
                found = True
                break
        if not found:
            return False

    relations = set(relation_fields)
    for name, expected in predicate.active_constraints.items():
        actual = getattr(entity, name, None)
        if name in relations:
            if not any(_equals(member, expected) for member in actual or ()):
                return False
        elif not _equals(actual, expected):
            return False
    return True


def visible_subset(
    collection: Iterable[E],
    predicate: FilterPredicate,
    *,
    search_fields: Iterable[str],
    relation_fields: Iterable[str] = (),
) -> list[E]:
    """Entities of `collection` that pass `predicate`, in collection order.

    Pure: the same collection and predicate always give the same subset,
    and filtering a subset again with the same predicate returns it unchanged.
    """
    search_fields = tuple(search_fields)
    relation_fields = tuple(relation_fields)
    return [
        entity
        for entity in collection
        if matches(
            entity,
            predicate,
            search_fields=search_fields,
            relation_fields=relation_fields,
        )
    ]
