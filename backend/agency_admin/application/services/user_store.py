"""Store for the user management screen (the `profiles` table)."""

from agency_admin.application.interfaces import Row
from agency_admin.application.schemas import UserProfileCreate, UserProfileUpdate
from agency_admin.application.services.entity_store import EntityStore, parse_timestamp
from agency_admin.domain.entities import UserProfile


class UserStore(EntityStore[UserProfile]):
    entity_label = "User"
    table = "profiles"
    order_by = "created_at"
    descending = True
    create_schema = UserProfileCreate
    update_schema = UserProfileUpdate
    export_columns = (
        ("Email", "email"),
        ("Full Name", "full_name"),
        ("Role", "role"),
        ("Created At", "created_at"),
    )

    def _to_entity(self, row: Row) -> UserProfile:
        return UserProfile(
            id=str(row["id"]),
            email=row["email"],
            full_name=row.get("full_name"),
            avatar_url=row.get("avatar_url"),
            role=row.get("role") or "user",
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row.get("updated_at") or row["created_at"]),
        )

    def _describe(self, entity: UserProfile) -> str:
        return f"{entity.display_name} ({entity.role})"
