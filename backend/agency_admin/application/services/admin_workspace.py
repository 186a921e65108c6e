"""Admin workspace — the stores, selections and bulk executors of one signed-in admin."""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from agency_admin.application.interfaces import DataGateway
from agency_admin.application.schemas import (
    BlogPostResponse,
    CategoryResponse,
    ContactSubmissionAdminResponse,
    SeoPageResponse,
    UserProfileResponse,
)
from agency_admin.application.services.auth_service import AuthService
from agency_admin.application.services.blog_post_store import BlogPostStore
from agency_admin.application.services.bulk_action_executor import BulkActionExecutor
from agency_admin.application.services.category_store import CategoryStore
from agency_admin.application.services.contact_submission_store import ContactSubmissionStore
from agency_admin.application.services.dashboard_stats_service import DashboardStatsService
from agency_admin.application.services.entity_store import EntityStore, StoreState
from agency_admin.application.services.notification_queue import NotificationQueue
from agency_admin.application.services.selection_controller import SelectionController
from agency_admin.application.services.seo_page_store import SeoPageStore
from agency_admin.application.services.user_store import UserStore

logger = logging.getLogger(__name__)


@dataclass
class CollectionView:
    """Everything one list screen needs: data, selection, bulk actions and how to render a row."""

    store: EntityStore[Any]
    selection: SelectionController
    executor: BulkActionExecutor
    response_schema: type[BaseModel]
    filter_fields: tuple[str, ...]

    async def ensure_loaded(self) -> None:
        if self.store.state == StoreState.IDLE:
            await self.store.load()


class AdminWorkspace:
    """Composition root for one admin session.

    Wires one store per entity type to its selection controller and bulk
    executor, all sharing the session's gateway and notification queue.
    """

    def __init__(
        self,
        gateway: DataGateway,
        auth: AuthService,
        *,
        bulk_concurrency: int = 10,
        demo_analytics: bool = False,
    ):
        self.auth = auth
        self.notifications = NotificationQueue()

        self.users = UserStore(gateway, self.notifications, bulk_concurrency=bulk_concurrency)
        self.posts = BlogPostStore(
            gateway, self.notifications, auth=auth, bulk_concurrency=bulk_concurrency
        )
        self.categories = CategoryStore(gateway, self.notifications, bulk_concurrency=bulk_concurrency)
        self.seo_pages = SeoPageStore(gateway, self.notifications, bulk_concurrency=bulk_concurrency)
        self.contact_submissions = ContactSubmissionStore(
            gateway, self.notifications, bulk_concurrency=bulk_concurrency
        )

        self.views: dict[str, CollectionView] = {
            "users": self._view(
                self.users,
                UserProfileResponse,
                search_fields=("email", "full_name"),
                filter_fields=("role",),
            ),
            "posts": self._view(
                self.posts,
                BlogPostResponse,
                search_fields=("title", "excerpt", "slug"),
                relation_fields=("category_ids", "tags"),
                filter_fields=("status", "author_id", "category_ids", "tags"),
            ),
            "categories": self._view(
                self.categories,
                CategoryResponse,
                search_fields=("name", "description"),
                filter_fields=("color",),
            ),
            "seo-pages": self._view(
                self.seo_pages,
                SeoPageResponse,
                search_fields=("url", "meta_title"),
                relation_fields=("issues",),
                filter_fields=("issues", "mobile_friendly", "sitemap_indexed", "https_enabled"),
            ),
            "contact-submissions": self._view(
                self.contact_submissions,
                ContactSubmissionAdminResponse,
                search_fields=("name", "email", "company"),
                filter_fields=("status", "service_interest"),
            ),
        }

        self.stats = DashboardStatsService(
            self.users,
            self.posts,
            self.categories,
            self.seo_pages,
            demo_analytics=demo_analytics,
        )

    def view(self, name: str) -> CollectionView:
        """Look up a list screen by name. Raises KeyError for unknown names."""
        return self.views[name]

    async def ensure_all_loaded(self) -> None:
        for view in self.views.values():
            await view.ensure_loaded()

    def close(self) -> None:
        for view in self.views.values():
            view.selection.unbind()
            view.store.close()
        logger.debug("Closed admin workspace")

    def _view(
        self,
        store: EntityStore[Any],
        response_schema: type[BaseModel],
        *,
        search_fields: tuple[str, ...],
        filter_fields: tuple[str, ...],
        relation_fields: tuple[str, ...] = (),
    ) -> CollectionView:
        selection = SelectionController(search_fields=search_fields, relation_fields=relation_fields)
        selection.bind(store)
        return CollectionView(
            store=store,
            selection=selection,
            executor=BulkActionExecutor(store, selection, self.notifications),
            response_schema=response_schema,
            filter_fields=filter_fields,
        )
