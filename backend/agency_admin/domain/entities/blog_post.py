"""Domain entity for blog posts plus the slug / reading-time rules of the CMS."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

POST_STATUSES = ("draft", "published", "archived")
WORDS_PER_MINUTE = 200

_NON_SLUG_CHARS = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """Lowercase, drop punctuation, collapse whitespace runs into dashes."""
    cleaned = _NON_SLUG_CHARS.sub("", text.lower())
    return _WHITESPACE.sub("-", cleaned.strip())


def reading_time_minutes(content: str) -> int:
    """Estimated reading time, never less than one minute."""
    word_count = len(content.split())
    return max(1, round(word_count / WORDS_PER_MINUTE))


@dataclass
class BlogPost:
    """A blog post managed through the CMS.

    Category membership is many-to-many; `category_ids` holds the ids of
    the categories linked through the `blog_post_categories` table.
    """

    title: str
    content: str
    id: str = ""
    slug: str = ""
    excerpt: str | None = None
    featured_image: str | None = None
    author_id: str | None = None
    status: str = "draft"  # "draft" | "published" | "archived"
    published_at: datetime | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    tags: list[str] = field(default_factory=list)
    reading_time: int | None = None
    view_count: int = 0
    category_ids: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_published(self) -> bool:
        return self.status == "published"
