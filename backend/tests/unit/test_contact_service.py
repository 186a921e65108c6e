"""Unit tests for the ContactService."""

import pytest

from agency_admin.application.services import ContactService
from agency_admin.application.services.contact_service import CONTACT_FUNCTION
from tests.fakes import CollectingNotifier, InMemoryGateway

VALID = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "company": "Acme",
    "message": "We need a new website.",
}


@pytest.fixture
def gateway() -> InMemoryGateway:
    gateway = InMemoryGateway()
    gateway.functions[CONTACT_FUNCTION] = lambda payload: {"success": True, "id": "sub-1"}
    return gateway


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.mark.asyncio
async def test_submit_invokes_contact_function(
    gateway: InMemoryGateway, notifier: CollectingNotifier
):
    service = ContactService(gateway, notifier)

    result = await service.submit(VALID)

    assert result.success
    assert result.data["id"] == "sub-1"
    operation, function, payload = gateway.calls[0]
    assert (operation, function) == ("invoke", "contact-notification")
    assert payload == VALID
    assert notifier.notifications[0].title == "Message sent!"


@pytest.mark.asyncio
async def test_invalid_submission_never_invokes_function(
    gateway: InMemoryGateway, notifier: CollectingNotifier
):
    service = ContactService(gateway, notifier)

    result = await service.submit({**VALID, "email": "nope"})

    assert not result.success
    assert result.reason == "validation"
    assert "email" in result.error
    assert gateway.calls == []
    assert notifier.notifications[0].variant == "destructive"


@pytest.mark.asyncio
async def test_gateway_failure_is_reported(gateway: InMemoryGateway, notifier: CollectingNotifier):
    gateway.fail("invoke", CONTACT_FUNCTION, message="Function timed out")
    service = ContactService(gateway, notifier)

    result = await service.submit(VALID)

    assert not result.success
    assert result.error == "Function timed out"
    assert len(notifier.notifications) == 1


@pytest.mark.asyncio
async def test_function_reporting_failure_counts_as_failure(gateway: InMemoryGateway):
    gateway.functions[CONTACT_FUNCTION] = lambda payload: {"success": False, "error": "SMTP down"}
    service = ContactService(gateway)

    result = await service.submit(VALID)

    assert not result.success
    assert result.error == "SMTP down"
