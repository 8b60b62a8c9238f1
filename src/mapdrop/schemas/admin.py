"""Admin-facing Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel

from .location import VerificationStatus


class AdminUserResponse(BaseModel):
    """User row shown on the admin dashboard."""

    id: int
    email: str
    display_name: str | None
    is_admin: bool
    credits: int
    created_at: datetime
    location_count: int


class StatusOverride(BaseModel):
    """Schema for an admin verification status override."""

    status: VerificationStatus


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
