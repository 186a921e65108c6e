"""Pydantic DTOs shared by the admin list-management endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class CollectionViewResponse(BaseModel):
    """What a list screen renders: the visible subset plus selection state."""

    items: list[dict[str, Any]]
    total: int
    visible_count: int
    selected_ids: list[str]
    select_all_state: str  # "none" | "some" | "all"
    state: str  # "idle" | "loading" | "ready" | "errored"
    stale: bool
    error: str | None = None


class BulkActionRequest(BaseModel):
    action: Literal["update", "delete", "export"]
    fields: dict[str, Any] = Field(default_factory=dict)


class BulkFailureSchema(BaseModel):
    id: str
    error: str


class BulkOutcomeResponse(BaseModel):
    success_count: int
    failure_count: int
    errors: list[BulkFailureSchema]
    payload: str | None = None
    selected_ids: list[str]


class NotificationSchema(BaseModel):
    title: str
    description: str
    variant: str

    model_config = {"from_attributes": True}


class DashboardStatsResponse(BaseModel):
    users_by_role: dict[str, int]
    posts_by_status: dict[str, int]
    posts_per_category: dict[str, int]
    total_post_views: int
    average_reading_time: float
    seo_average_score: float | None
    seo_pages_with_issues: int
    demo: dict[str, Any] | None = None


class SignInRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    access_token: str
    user_id: str
    email: str
    role: str | None
