"""Store for blog category management."""

from typing import Any

from agency_admin.application.interfaces import Row
from agency_admin.application.schemas import CategoryCreate, CategoryUpdate
from agency_admin.application.services.entity_store import EntityStore, parse_timestamp
from agency_admin.domain.entities import BlogCategory, DEFAULT_CATEGORY_COLOR, slugify


class CategoryStore(EntityStore[BlogCategory]):
    entity_label = "Category"
    table = "blog_categories"
    order_by = "name"
    descending = False
    create_schema = CategoryCreate
    update_schema = CategoryUpdate
    export_columns = (
        ("Name", "name"),
        ("Slug", "slug"),
        ("Description", "description"),
        ("Color", "color"),
    )

    def _to_entity(self, row: Row) -> BlogCategory:
        return BlogCategory(
            id=str(row["id"]),
            name=row["name"],
            slug=row.get("slug") or slugify(row["name"]),
            description=row.get("description"),
            color=row.get("color") or DEFAULT_CATEGORY_COLOR,
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row.get("updated_at") or row["created_at"]),
        )

    async def _prepare_create(self, fields: dict[str, Any]) -> Row:
        return {
            "name": fields["name"],
            "slug": slugify(fields["name"]),
            "description": fields.get("description"),
            "color": fields.get("color") or DEFAULT_CATEGORY_COLOR,
        }

    async def _prepare_update(self, current: BlogCategory, fields: dict[str, Any]) -> Row:
        patch = dict(fields)
        if "name" in patch:
            patch["slug"] = slugify(patch["name"])
        return patch

    async def _delete(self, current: BlogCategory) -> None:
        await self._gateway.delete("blog_post_categories", {"category_id": current.id})
        await self._gateway.delete(self.table, {"id": current.id})

    def _describe(self, entity: BlogCategory) -> str:
        return f'"{entity.name}"'
