"""Dashboard statistics aggregated from the loaded admin collections."""

import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from agency_admin.application.services.blog_post_store import BlogPostStore
from agency_admin.application.services.category_store import CategoryStore
from agency_admin.application.services.seo_page_store import SeoPageStore
from agency_admin.application.services.user_store import UserStore
from agency_admin.domain.entities import KNOWN_ROLES, POST_STATUSES


@dataclass
class DashboardStats:
    users_by_role: dict[str, int]
    posts_by_status: dict[str, int]
    posts_per_category: dict[str, int]
    total_post_views: int
    average_reading_time: float
    seo_average_score: float | None
    seo_pages_with_issues: int
    demo: dict[str, Any] | None = field(default=None)


class DashboardStatsService:
    """Computes overview numbers from store contents instead of hard-coded values.

    With `demo_analytics` enabled a clearly labelled block of placeholder
    traffic metrics is added; it is never mixed into the real figures.
    """

    def __init__(
        self,
        users: UserStore,
        posts: BlogPostStore,
        categories: CategoryStore,
        seo_pages: SeoPageStore,
        *,
        demo_analytics: bool = False,
    ):
        self._users = users
        self._posts = posts
        self._categories = categories
        self._seo_pages = seo_pages
        self._demo_analytics = demo_analytics

    def compute(self) -> DashboardStats:
        users = self._users.items
        posts = self._posts.items
        pages = self._seo_pages.items

        roles = Counter(user.role for user in users)
        statuses = Counter(post.status for post in posts)

        names = {category.id: category.name for category in self._categories.items}
        per_category: Counter[str] = Counter()
        for post in posts:
            for category_id in post.category_ids:
                per_category[names.get(category_id, category_id)] += 1

        reading_times = [post.reading_time for post in posts if post.reading_time]
        scores = [page.seo_score for page in pages if page.seo_score is not None]

        return DashboardStats(
            users_by_role={role: roles.get(role, 0) for role in (*KNOWN_ROLES, *roles)},
            posts_by_status={status: statuses.get(status, 0) for status in (*POST_STATUSES, *statuses)},
            posts_per_category=dict(per_category),
            total_post_views=sum(post.view_count for post in posts),
            average_reading_time=round(sum(reading_times) / len(reading_times), 1) if reading_times else 0.0,
            seo_average_score=round(sum(scores) / len(scores), 1) if scores else None,
            seo_pages_with_issues=sum(1 for page in pages if page.issues),
            demo=self._demo_block() if self._demo_analytics else None,
        )

    @staticmethod
    def _demo_block() -> dict[str, Any]:
        rng = random.Random(42)
        return {
            "label": "Demo data, not measured",
            "page_views": rng.randint(5_000, 20_000),
            "bounce_rate": round(rng.uniform(30, 60), 1),
            "conversion_rate": round(rng.uniform(1, 5), 2),
        }
