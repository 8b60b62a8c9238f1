"""Profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from mapdrop.api.v1.dependencies import CurrentUserDep
from mapdrop.models import User
from mapdrop.schemas.user import UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUserDep) -> User:
    """Return the caller's profile, credits and badges."""
    return current_user
