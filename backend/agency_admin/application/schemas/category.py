"""Pydantic DTOs for blog category management."""

from datetime import datetime

from pydantic import BaseModel, Field

_HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Web Development"])
    description: str | None = None
    color: str | None = Field(None, pattern=_HEX_COLOR)

    model_config = {"extra": "forbid"}


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    color: str | None = Field(None, pattern=_HEX_COLOR)

    model_config = {"extra": "forbid"}


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None
    color: str
    created_at: datetime

    model_config = {"from_attributes": True}
