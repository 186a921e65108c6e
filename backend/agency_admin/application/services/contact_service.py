"""Application service for the public contact form."""

import logging
from typing import Any

from pydantic import ValidationError

from agency_admin.application.interfaces import DataGateway, Notifier
from agency_admin.application.schemas import ContactSubmissionCreate
from agency_admin.domain.entities import MutationResult, Notification
from agency_admin.domain.exceptions import GatewayError

logger = logging.getLogger(__name__)

CONTACT_FUNCTION = "contact-notification"


class ContactService:
    """Validates a contact submission and hands it to the `contact-notification` function."""

    def __init__(self, gateway: DataGateway, notifier: Notifier | None = None):
        self._gateway = gateway
        self._notifier = notifier

    async def submit(self, data: ContactSubmissionCreate | dict[str, Any]) -> MutationResult[dict]:
        try:
            submission = (
                data
                if isinstance(data, ContactSubmissionCreate)
                else ContactSubmissionCreate.model_validate(data)
            )
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][-1]) for err in exc.errors())
            return self._failed(f"Please check these fields: {fields}", reason="validation")

        try:
            response = await self._gateway.invoke(
                CONTACT_FUNCTION, submission.model_dump(exclude_none=True)
            )
        except GatewayError as exc:
            logger.error("Contact notification failed for %s: %s", submission.email, exc)
            return self._failed(exc.message)

        if response.get("success") is False:
            return self._failed(str(response.get("error") or "Submission was rejected"))

        logger.info("Contact submission from %s delivered", submission.email)
        if self._notifier is not None:
            self._notifier.notify(
                Notification(
                    title="Message sent!",
                    description="Thank you for contacting us. We'll get back to you soon.",
                )
            )
        return MutationResult.ok(response)

    def _failed(self, error: str, reason: str = "gateway") -> MutationResult[dict]:
        if self._notifier is not None:
            self._notifier.notify(
                Notification(title="Error sending message", description=error, variant="destructive")
            )
        return MutationResult.fail(error, reason=reason)
