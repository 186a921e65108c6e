"""Local stand-ins for the hosted serverless functions.

Used by the SQLAlchemy gateway when the back-office runs against a
self-hosted database. Each handler receives the gateway's session; the
gateway commits after the handler returns.
"""

import logging
import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from agency_admin.infrastructure.database.models import (
    ContactSubmissionModel,
    NotificationModel,
)

logger = logging.getLogger(__name__)


async def contact_notification(session: AsyncSession, payload: dict[str, Any]) -> dict[str, Any]:
    """Store a contact submission and raise an admin notification for it."""
    missing = [key for key in ("name", "email", "message") if not payload.get(key)]
    if missing:
        return {"success": False, "error": f"Missing required fields: {', '.join(missing)}"}

    submission = ContactSubmissionModel(
        id=str(uuid.uuid4()),
        name=payload["name"],
        email=payload["email"],
        phone=payload.get("phone"),
        company=payload.get("company"),
        service_interest=payload.get("service_interest"),
        message=payload["message"],
        status="new",
    )
    session.add(submission)
    session.add(
        NotificationModel(
            id=str(uuid.uuid4()),
            title="New Contact Submission",
            message=f"New contact from {submission.name} ({submission.email})",
            type="info",
            data={"contact_id": submission.id, "source": "contact_form"},
        )
    )
    await session.flush()

    logger.info("Stored contact submission %s", submission.id)
    return {
        "success": True,
        "message": "Contact submission received successfully",
        "id": submission.id,
    }


LOCAL_FUNCTIONS = {
    "contact-notification": contact_notification,
}
