"""Domain entity for per-page SEO metrics."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class SeoPage:
    """SEO measurements for one public URL (the `seo_metrics` table).

    `issues` is derived from the metrics so the SEO page list can be
    filtered by the problems a page has.
    """

    url: str
    id: str = ""
    meta_title: str | None = None
    meta_description: str | None = None
    seo_score: int | None = None
    mobile_friendly: bool | None = None
    sitemap_indexed: bool | None = None
    https_enabled: bool | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def issues(self) -> list[str]:
        found: list[str] = []
        if not self.meta_title:
            found.append("missing_meta_title")
        if not self.meta_description:
            found.append("missing_meta_description")
        if self.mobile_friendly is False:
            found.append("not_mobile_friendly")
        if self.sitemap_indexed is False:
            found.append("not_in_sitemap")
        if self.https_enabled is False:
            found.append("no_https")
        return found
