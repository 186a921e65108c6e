"""Domain entity for contact form submissions."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class ContactSubmission:
    name: str
    email: str
    message: str
    id: str = ""
    phone: str | None = None
    company: str | None = None
    service_interest: str | None = None
    status: str = "new"  # "new" | "read" | "replied" | "closed"
    admin_notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
