"""Store for the blog CMS.

A post's category membership lives in the `blog_post_categories` join
table. It is fetched alongside the posts and joined here, so a post
entity always carries its `category_ids`.
"""

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from agency_admin.application.interfaces import DataGateway, Notifier, Row
from agency_admin.application.schemas import BlogPostCreate, BlogPostUpdate
from agency_admin.application.services.auth_service import AuthService
from agency_admin.application.services.entity_store import (
    EntityStore,
    as_list,
    parse_timestamp,
)
from agency_admin.domain.entities import BlogPost, reading_time_minutes, slugify
from agency_admin.domain.exceptions import GatewayError, PartialWriteError

logger = logging.getLogger(__name__)

LINK_TABLE = "blog_post_categories"


class BlogPostStore(EntityStore[BlogPost]):
    entity_label = "Post"
    table = "blog_posts"
    order_by = "created_at"
    descending = True
    create_schema = BlogPostCreate
    update_schema = BlogPostUpdate
    export_columns = (
        ("Title", "title"),
        ("Slug", "slug"),
        ("Status", "status"),
        ("Published At", "published_at"),
        ("Views", "view_count"),
    )

    def __init__(
        self,
        gateway: DataGateway,
        notifier: Notifier | None = None,
        *,
        auth: AuthService | None = None,
        bulk_concurrency: int = 10,
    ):
        super().__init__(gateway, notifier, bulk_concurrency=bulk_concurrency)
        self._auth = auth

    def _to_entity(self, row: Row) -> BlogPost:
        return BlogPost(
            id=str(row["id"]),
            title=row["title"],
            slug=row.get("slug") or slugify(row["title"]),
            content=row.get("content") or "",
            excerpt=row.get("excerpt"),
            featured_image=row.get("featured_image"),
            author_id=row.get("author_id"),
            status=row.get("status") or "draft",
            published_at=parse_timestamp(row.get("published_at")),
            meta_title=row.get("meta_title"),
            meta_description=row.get("meta_description"),
            tags=as_list(row.get("tags")),
            reading_time=row.get("reading_time"),
            view_count=row.get("view_count") or 0,
            category_ids=[str(c) for c in as_list(row.get("category_ids"))],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row.get("updated_at") or row["created_at"]),
        )

    async def _fetch(self) -> list[BlogPost]:
        rows = await self._gateway.select(
            self.table, order_by=self.order_by, descending=self.descending
        )
        links = await self._gateway.select(LINK_TABLE)

        categories_by_post: dict[str, list[str]] = defaultdict(list)
        for link in links:
            categories_by_post[str(link["post_id"])].append(str(link["category_id"]))

        return [
            self._map_row({**row, "category_ids": categories_by_post.get(str(row["id"]), [])})
            for row in rows
        ]

    async def _prepare_create(self, fields: dict[str, Any]) -> Row:
        status = fields.get("status") or "draft"
        published_at = fields.get("published_at")
        if published_at is None and status == "published":
            published_at = datetime.now(timezone.utc)

        return {
            "title": fields["title"],
            "slug": slugify(fields["title"]),
            "content": fields["content"],
            "excerpt": fields.get("excerpt"),
            "featured_image": fields.get("featured_image"),
            "meta_title": fields.get("meta_title"),
            "meta_description": fields.get("meta_description"),
            "tags": fields.get("tags") or [],
            "reading_time": reading_time_minutes(fields["content"]),
            "status": status,
            "published_at": published_at,
            "author_id": self._current_user_id(),
        }

    async def _prepare_update(self, current: BlogPost, fields: dict[str, Any]) -> Row:
        patch = {k: v for k, v in fields.items() if k != "category_ids"}
        if patch.get("content"):
            patch["reading_time"] = reading_time_minutes(patch["content"])
        if (
            patch.get("status") == "published"
            and patch.get("published_at") is None
            and current.published_at is None
        ):
            patch["published_at"] = datetime.now(timezone.utc)
        return patch

    async def _insert(self, row: Row, fields: dict[str, Any]) -> BlogPost:
        post = await super()._insert(row, fields)
        category_ids = fields.get("category_ids") or []
        if not category_ids:
            return post

        try:
            await self._link_categories(post.id, category_ids)
        except GatewayError:
            # Undo the insert so the post does not exist without its categories
            logger.warning("Linking categories for post %s failed; removing the post", post.id)
            await self._gateway.delete(self.table, {"id": post.id})
            raise
        return replace(post, category_ids=list(category_ids))

    async def _patch(self, current: BlogPost, patch: Row, fields: dict[str, Any]) -> BlogPost:
        updated = await super()._patch(current, patch, fields)
        if "category_ids" not in fields or fields["category_ids"] is None:
            return replace(updated, category_ids=list(current.category_ids))

        category_ids = list(fields["category_ids"])
        try:
            await self._gateway.delete(LINK_TABLE, {"post_id": current.id})
            if category_ids:
                await self._link_categories(current.id, category_ids)
        except GatewayError as exc:
            await self._restore_links(current)
            raise PartialWriteError(exc.status_code, exc.message, exc.operation) from exc
        return replace(updated, category_ids=category_ids)

    async def _restore_links(self, current: BlogPost) -> None:
        """Best-effort return to the post's previous category links."""
        try:
            await self._gateway.delete(LINK_TABLE, {"post_id": current.id})
            if current.category_ids:
                await self._link_categories(current.id, list(current.category_ids))
        except GatewayError as exc:
            logger.warning("Could not restore categories of post %s: %s", current.id, exc.message)

    async def _refetch(self, current: BlogPost) -> BlogPost | None:
        rows = await self._gateway.select(self.table, match={"id": current.id})
        if not rows:
            return None
        links = await self._gateway.select(LINK_TABLE, match={"post_id": current.id})
        return self._map_row(
            {**rows[0], "category_ids": [str(link["category_id"]) for link in links]}
        )

    async def _delete(self, current: BlogPost) -> None:
        await self._gateway.delete(LINK_TABLE, {"post_id": current.id})
        await self._gateway.delete(self.table, {"id": current.id})

    async def _link_categories(self, post_id: str, category_ids: list[str]) -> None:
        await self._gateway.insert(
            LINK_TABLE,
            [{"post_id": post_id, "category_id": category_id} for category_id in category_ids],
        )

    def _current_user_id(self) -> str | None:
        if self._auth is None:
            return None
        user = self._auth.snapshot.user
        return user.id if user else None

    def _describe(self, entity: BlogPost) -> str:
        return f'"{entity.title}" ({entity.status})'
