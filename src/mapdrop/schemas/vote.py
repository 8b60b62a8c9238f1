"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from .location import VerificationStatus

Direction = Literal["up", "down"]


class VoteCreate(BaseModel):
    """Schema for casting a vote."""

    location_id: int
    direction: Direction = Field(..., description="'up' or 'down'")


class VoteResponse(BaseModel):
    """Outcome of a vote together with the location's refreshed score."""

    location_id: int
    previous_direction: Direction | None
    applied_direction: Direction
    changed: bool
    upvotes: int
    downvotes: int
    total_points: int
    verification_status: VerificationStatus
    previous_status: VerificationStatus | None = None


class MyVoteResponse(BaseModel):
    """The caller's current vote on a location."""

    direction: Direction | None
