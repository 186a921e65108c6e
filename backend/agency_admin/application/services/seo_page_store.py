"""Store for the SEO page list (the `seo_metrics` table)."""

from agency_admin.application.interfaces import Row
from agency_admin.application.schemas import SeoPageCreate, SeoPageUpdate
from agency_admin.application.services.entity_store import EntityStore, parse_timestamp
from agency_admin.domain.entities import SeoPage


class SeoPageStore(EntityStore[SeoPage]):
    entity_label = "SEO page"
    table = "seo_metrics"
    order_by = "created_at"
    descending = True
    create_schema = SeoPageCreate
    update_schema = SeoPageUpdate
    export_columns = (
        ("URL", "url"),
        ("Meta Title", "meta_title"),
        ("SEO Score", "seo_score"),
        ("Issues", "issues"),
        ("Last Updated", "updated_at"),
    )

    def _to_entity(self, row: Row) -> SeoPage:
        return SeoPage(
            id=str(row["id"]),
            url=row["url"],
            meta_title=row.get("meta_title"),
            meta_description=row.get("meta_description"),
            seo_score=row.get("seo_score"),
            mobile_friendly=row.get("mobile_friendly"),
            sitemap_indexed=row.get("sitemap_indexed"),
            https_enabled=row.get("https_enabled"),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row.get("updated_at") or row["created_at"]),
        )

    def _describe(self, entity: SeoPage) -> str:
        return entity.url
