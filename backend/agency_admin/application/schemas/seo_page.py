"""Pydantic DTOs for the SEO page list."""

from datetime import datetime

from pydantic import BaseModel, Field


class SeoPageCreate(BaseModel):
    url: str = Field(..., min_length=1, examples=["/services/web-development"])
    meta_title: str | None = None
    meta_description: str | None = None
    seo_score: int | None = Field(None, ge=0, le=100)
    mobile_friendly: bool | None = None
    sitemap_indexed: bool | None = None
    https_enabled: bool | None = None

    model_config = {"extra": "forbid"}


class SeoPageUpdate(BaseModel):
    url: str | None = Field(None, min_length=1)
    meta_title: str | None = None
    meta_description: str | None = None
    seo_score: int | None = Field(None, ge=0, le=100)
    mobile_friendly: bool | None = None
    sitemap_indexed: bool | None = None
    https_enabled: bool | None = None

    model_config = {"extra": "forbid"}


class SeoPageResponse(BaseModel):
    id: str
    url: str
    meta_title: str | None
    meta_description: str | None
    seo_score: int | None
    mobile_friendly: bool | None
    sitemap_indexed: bool | None
    https_enabled: bool | None
    issues: list[str]
    updated_at: datetime

    model_config = {"from_attributes": True}
