"""SQLAlchemy ORM model for per-page SEO metrics."""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agency_admin.infrastructure.database.base import Base, TimestampMixin


class SeoMetricModel(TimestampMixin, Base):
    """ORM model — maps to the 'seo_metrics' table."""

    __tablename__ = "seo_metrics"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    url: Mapped[str] = mapped_column(String(1024), nullable=False, index=True)
    meta_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    seo_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mobile_friendly: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    sitemap_indexed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    https_enabled: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
