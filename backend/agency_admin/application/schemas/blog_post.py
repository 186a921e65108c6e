"""Pydantic DTOs for the blog CMS."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class BlogPostCreate(BaseModel):
    """Schema for creating a new post. New posts are drafts unless stated otherwise."""

    title: str = Field(..., min_length=1, max_length=255, examples=["Draft Post"])
    content: str = ""
    excerpt: str | None = None
    featured_image: str | None = None
    meta_title: str | None = Field(None, max_length=70)
    meta_description: str | None = Field(None, max_length=160)
    tags: list[str] = Field(default_factory=list)
    status: Literal["draft", "published"] = "draft"
    category_ids: list[str] = Field(default_factory=list)
    published_at: datetime | None = None

    model_config = {"extra": "forbid"}


class BlogPostUpdate(BaseModel):
    """Schema for patching a post — all fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = Field(None, min_length=1)
    excerpt: str | None = None
    featured_image: str | None = None
    meta_title: str | None = Field(None, max_length=70)
    meta_description: str | None = Field(None, max_length=160)
    tags: list[str] | None = None
    status: Literal["draft", "published", "archived"] | None = None
    category_ids: list[str] | None = None
    published_at: datetime | None = None

    model_config = {"extra": "forbid"}


class BlogPostResponse(BaseModel):
    id: str
    title: str
    slug: str
    excerpt: str | None
    content: str
    featured_image: str | None
    author_id: str | None
    status: str
    published_at: datetime | None
    meta_title: str | None
    meta_description: str | None
    tags: list[str]
    reading_time: int | None
    view_count: int
    category_ids: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
