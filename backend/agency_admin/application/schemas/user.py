"""Pydantic DTOs for the user management screen."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["user", "editor", "admin"]
_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserProfileCreate(BaseModel):
    """Schema for creating a profile row."""

    email: str = Field(..., pattern=_EMAIL_PATTERN, examples=["jane@example.com"])
    full_name: str | None = Field(None, max_length=255)
    avatar_url: str | None = None
    role: Role = "user"

    model_config = {"extra": "forbid"}


class UserProfileUpdate(BaseModel):
    """Schema for updating a profile — all fields optional."""

    email: str | None = Field(None, pattern=_EMAIL_PATTERN)
    full_name: str | None = Field(None, max_length=255)
    avatar_url: str | None = None
    role: Role | None = None

    model_config = {"extra": "forbid"}


class UserProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str | None
    avatar_url: str | None
    role: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
