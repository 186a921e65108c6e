"""Store for the contact submission inbox (the `contact_submissions` table).

Submissions arrive through the public contact form; admins triage them
by status and keep private notes on each one.
"""

from typing import Any

from agency_admin.application.interfaces import Row
from agency_admin.application.schemas import ContactSubmissionCreate, ContactSubmissionUpdate
from agency_admin.application.services.entity_store import EntityStore, parse_timestamp
from agency_admin.domain.entities import ContactSubmission


class ContactSubmissionStore(EntityStore[ContactSubmission]):
    entity_label = "Submission"
    table = "contact_submissions"
    order_by = "created_at"
    descending = True
    create_schema = ContactSubmissionCreate
    update_schema = ContactSubmissionUpdate
    export_columns = (
        ("Name", "name"),
        ("Email", "email"),
        ("Company", "company"),
        ("Service", "service_interest"),
        ("Status", "status"),
        ("Received At", "created_at"),
    )

    def _to_entity(self, row: Row) -> ContactSubmission:
        return ContactSubmission(
            id=str(row["id"]),
            name=row["name"],
            email=row["email"],
            message=row.get("message") or "",
            phone=row.get("phone"),
            company=row.get("company"),
            service_interest=row.get("service_interest"),
            status=row.get("status") or "new",
            admin_notes=row.get("admin_notes"),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row.get("updated_at") or row["created_at"]),
        )

    async def _prepare_create(self, fields: dict[str, Any]) -> Row:
        return {**fields, "status": "new"}

    def _describe(self, entity: ContactSubmission) -> str:
        return f"{entity.name} ({entity.status})"
