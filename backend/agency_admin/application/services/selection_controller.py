"""Selection & filter controller — UI-local selection and filter state of one list screen."""

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, TypeVar

from agency_admin.application.services.entity_store import EntityStore
from agency_admin.application.services.filtering import FilterPredicate, visible_subset

E = TypeVar("E")


class SelectAllState(str, Enum):
    """State of the "select all" checkbox over the visible rows."""

    NONE = "none"
    SOME = "some"
    ALL = "all"


class SelectionController:
    """Tracks which ids are checked for bulk actions and which filter is active.

    Once bound to a store, the selection is intersected with the store's
    ids after every collection change, so deleted entities never stay
    selected.
    """

    def __init__(
        self,
        *,
        search_fields: Iterable[str],
        relation_fields: Iterable[str] = (),
    ):
        self._search_fields = tuple(search_fields)
        self._relation_fields = tuple(relation_fields)
        self._predicate = FilterPredicate()
        self._selected: set[str] = set()
        self._known_ids: frozenset[str] | None = None
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def predicate(self) -> FilterPredicate:
        return self._predicate

    @property
    def selected(self) -> frozenset[str]:
        return frozenset(self._selected)

    def is_selected(self, entity_id: str) -> bool:
        return entity_id in self._selected

    # ── Filter ──────────────────────────────────────────────────────

    def set_filter(self, predicate: FilterPredicate) -> None:
        """Replace the active filter. The selection is left untouched."""
        self._predicate = predicate

    def visible(self, collection: Iterable[E]) -> list[E]:
        return visible_subset(
            collection,
            self._predicate,
            search_fields=self._search_fields,
            relation_fields=self._relation_fields,
        )

    # ── Selection ───────────────────────────────────────────────────

    def toggle_select(self, entity_id: str) -> bool:
        """Flip one id; returns whether it is selected afterwards."""
        if entity_id in self._selected:
            self._selected.discard(entity_id)
            return False
        if self._known_ids is not None and entity_id not in self._known_ids:
            return False
        self._selected.add(entity_id)
        return True

    def select_all(self, visible_ids: Iterable[str]) -> None:
        """Select exactly the visible ids, not the whole collection."""
        self._selected = set(visible_ids)

    def clear(self) -> None:
        self._selected.clear()

    def deselect(self, ids: Iterable[str]) -> None:
        self._selected.difference_update(ids)

    def select_all_state(self, visible_ids: Iterable[str]) -> SelectAllState:
        visible = set(visible_ids)
        if not visible:
            return SelectAllState.NONE
        checked = len(visible & self._selected)
        if checked == 0:
            return SelectAllState.NONE
        if checked == len(visible):
            return SelectAllState.ALL
        return SelectAllState.SOME

    # ── Store binding ───────────────────────────────────────────────

    def prune(self, collection_ids: Iterable[str]) -> None:
        """Drop selected ids that are no longer in the collection."""
        self._known_ids = frozenset(collection_ids)
        self._selected &= self._known_ids

    def bind(self, store: EntityStore[Any]) -> None:
        self.unbind()
        self.prune(store.ids)
        self._unsubscribe = store.subscribe(self.prune)

    def unbind(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
