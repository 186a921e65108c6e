"""Domain entity for admin-managed user profiles."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

KNOWN_ROLES = ("user", "editor", "admin")


@dataclass
class UserProfile:
    """A registered user as seen by the back-office (the `profiles` table)."""

    email: str
    id: str = ""
    full_name: str | None = None
    avatar_url: str | None = None
    role: str = "user"  # "user" | "editor" | "admin"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def display_name(self) -> str:
        return self.full_name or self.email

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
