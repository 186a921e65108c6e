"""Unit tests for the BulkActionExecutor."""

import csv
import io

import pytest

from agency_admin.application.services import (
    BulkAction,
    BulkActionExecutor,
    SelectionController,
    UserStore,
)
from tests.fakes import CollectingNotifier, InMemoryGateway, profile_row


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway(
        {
            "profiles": [
                profile_row(
                    "1", "ann@example.com", full_name="Ann", created_at="2024-03-03T10:00:00+00:00"
                ),
                profile_row("2", "bob@example.com", created_at="2024-03-02T10:00:00+00:00"),
                profile_row(
                    "3", "cat@example.com", "admin", created_at="2024-03-01T10:00:00+00:00"
                ),
            ]
        }
    )


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def store(gateway: InMemoryGateway) -> UserStore:
    return UserStore(gateway)


@pytest.fixture
def selection(store: UserStore) -> SelectionController:
    controller = SelectionController(search_fields=("email", "full_name"))
    controller.bind(store)
    return controller


@pytest.fixture
def executor(
    store: UserStore, selection: SelectionController, notifier: CollectingNotifier
) -> BulkActionExecutor:
    return BulkActionExecutor(store, selection, notifier)


def test_unknown_action_is_rejected():
    with pytest.raises(ValueError):
        BulkAction(kind="archive")


@pytest.mark.asyncio
async def test_partial_failure_keeps_only_failed_ids_selected(
    store: UserStore,
    gateway: InMemoryGateway,
    selection: SelectionController,
    executor: BulkActionExecutor,
    notifier: CollectingNotifier,
):
    await store.load()
    selection.select_all(["1", "2", "3"])
    gateway.fail("update", "profiles", match={"id": "2"}, status_code=403, message="permission denied")

    outcome = await executor.execute(BulkAction.update(role="admin"))

    assert outcome.success_count == 2
    assert outcome.failure_count == 1
    assert [(e.id, e.error) for e in outcome.errors] == [("2", "permission denied")]
    assert [u.role for u in store.items] == ["admin", "user", "admin"]
    assert selection.selected == {"2"}
    assert len(notifier.notifications) == 1
    assert notifier.notifications[0].title == "Bulk update partially failed"
    assert notifier.notifications[0].variant == "destructive"


@pytest.mark.asyncio
async def test_full_success_clears_selection_and_notifies_once(
    store: UserStore,
    selection: SelectionController,
    executor: BulkActionExecutor,
    notifier: CollectingNotifier,
):
    await store.load()
    selection.select_all(["1", "2"])

    outcome = await executor.execute(BulkAction.delete())

    assert outcome.success_count == 2
    assert outcome.failure_count == 0
    assert store.ids == ["3"]
    assert selection.selected == frozenset()
    assert [n.title for n in notifier.notifications] == ["Bulk delete successful"]


@pytest.mark.asyncio
async def test_total_failure_reports_first_error(
    store: UserStore,
    gateway: InMemoryGateway,
    selection: SelectionController,
    executor: BulkActionExecutor,
    notifier: CollectingNotifier,
):
    await store.load()
    selection.select_all(["1", "3"])
    gateway.fail("delete", "profiles", message="row-level security violation")

    outcome = await executor.execute(BulkAction.delete())

    assert outcome.success_count == 0
    assert outcome.failure_count == 2
    assert selection.selected == {"1", "3"}
    assert store.ids == ["1", "2", "3"]
    assert notifier.notifications[0].title == "Bulk delete failed"
    assert notifier.notifications[0].description == "row-level security violation"


@pytest.mark.asyncio
async def test_empty_selection_is_a_noop(
    store: UserStore,
    gateway: InMemoryGateway,
    executor: BulkActionExecutor,
    notifier: CollectingNotifier,
):
    await store.load()

    outcome = await executor.execute(BulkAction.update(role="editor"))

    assert outcome.success_count == 0
    assert outcome.failure_count == 0
    assert gateway.count("update") == 0
    assert notifier.notifications == []


@pytest.mark.asyncio
async def test_explicit_ids_override_selection(
    store: UserStore, selection: SelectionController, executor: BulkActionExecutor
):
    await store.load()
    selection.select_all(["1", "2"])

    outcome = await executor.execute(BulkAction.update(role="editor"), ids=["3"])

    assert outcome.success_count == 1
    assert store.get("3").role == "editor"
    assert store.get("1").role == "user"
    assert selection.selected == {"1", "2"}


@pytest.mark.asyncio
async def test_export_writes_csv_in_collection_order(
    store: UserStore, selection: SelectionController, executor: BulkActionExecutor
):
    await store.load()
    selection.select_all(["3", "1"])

    outcome = await executor.execute(BulkAction.export())

    rows = list(csv.reader(io.StringIO(outcome.payload)))
    assert rows[0] == ["Email", "Full Name", "Role", "Created At"]
    assert rows[1] == ["ann@example.com", "Ann", "user", "2024-03-03"]
    assert rows[2] == ["cat@example.com", "N/A", "admin", "2024-03-01"]
    assert outcome.success_count == 2
    assert selection.selected == frozenset()


@pytest.mark.asyncio
async def test_export_reports_ids_missing_from_collection(
    store: UserStore, executor: BulkActionExecutor
):
    await store.load()

    outcome = await executor.execute(BulkAction.export(), ids=["1", "gone"])

    assert outcome.success_count == 1
    assert [e.id for e in outcome.errors] == ["gone"]
