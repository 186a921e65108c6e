"""Pydantic DTOs for the public contact form and the admin submission list."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ContactSubmissionCreate(BaseModel):
    """Input of the `contact-notification` function."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str | None = Field(None, max_length=50)
    company: str | None = Field(None, max_length=255)
    service_interest: str | None = Field(None, max_length=100)
    message: str = Field(..., min_length=1, max_length=5000)


class ContactSubmissionResponse(BaseModel):
    success: bool
    message: str


SubmissionStatus = Literal["new", "read", "replied", "closed"]


class ContactSubmissionUpdate(BaseModel):
    """What an admin may change on a submission: its triage status and private notes."""

    status: SubmissionStatus | None = None
    admin_notes: str | None = Field(None, max_length=5000)

    model_config = {"extra": "forbid"}


class ContactSubmissionAdminResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None
    company: str | None
    service_interest: str | None
    message: str
    status: str
    admin_notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
