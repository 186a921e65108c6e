"""Domain entity for blog categories."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

DEFAULT_CATEGORY_COLOR = "#6366f1"


@dataclass
class BlogCategory:
    name: str
    id: str = ""
    slug: str = ""
    description: str | None = None
    color: str = DEFAULT_CATEGORY_COLOR
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
