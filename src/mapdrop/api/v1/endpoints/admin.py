"""Administrative endpoints for the MapDrop API."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Query

from mapdrop.api.v1.dependencies import CurrentAdminDep, SessionDep
from mapdrop.models import Location
from mapdrop.schemas.admin import AdminUserResponse, MessageResponse, StatusOverride
from mapdrop.schemas.location import LocationResponse
from mapdrop.services import admin as admin_service
from mapdrop.services import locations as location_service
from mapdrop.services import verification

router = APIRouter(prefix="/admin", tags=["admin"])


def _user_row(summary: admin_service.UserSummary) -> AdminUserResponse:
    user = summary.user
    return AdminUserResponse(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        is_admin=user.is_admin,
        credits=user.credits,
        created_at=user.created_at,
        location_count=summary.location_count,
    )


@router.get("/users", response_model=list[AdminUserResponse])
async def list_users(db: SessionDep, admin: CurrentAdminDep) -> list[AdminUserResponse]:
    """List all users with their location counts."""
    return [_user_row(summary) for summary in admin_service.list_users(db, admin)]


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int, db: SessionDep, admin: CurrentAdminDep) -> MessageResponse:
    """Delete a user together with their locations and votes."""
    admin_service.delete_user(db, admin, user_id)
    return MessageResponse(message="User and associated content deleted successfully")


@router.get("/users/{user_id}/locations", response_model=list[LocationResponse])
async def user_locations(user_id: int, db: SessionDep, admin: CurrentAdminDep) -> list[Location]:
    """List the locations created by one user."""
    return admin_service.user_locations(db, admin, user_id)


@router.get("/search", response_model=None)
async def search(
    db: SessionDep,
    admin: CurrentAdminDep,
    query: str = Query(..., min_length=1, max_length=200),
    search_type: Literal["locations", "users"] = Query("locations", alias="type"),
) -> list[LocationResponse] | list[AdminUserResponse]:
    """Search location text or user email/name."""
    if search_type == "users":
        return [_user_row(summary) for summary in admin_service.search_users(db, admin, query)]
    return [
        LocationResponse.model_validate(location)
        for location in admin_service.search_locations(db, admin, query)
    ]


@router.delete("/locations/{location_id}/media/{media_index}", response_model=LocationResponse)
async def delete_media(
    location_id: int,
    media_index: int,
    db: SessionDep,
    admin: CurrentAdminDep,
) -> Location:
    """Remove one media entry from a location."""
    return location_service.remove_media(db, admin, location_id, media_index)


@router.put("/locations/{location_id}/status", response_model=LocationResponse)
async def override_status(
    location_id: int,
    payload: StatusOverride,
    db: SessionDep,
    admin: CurrentAdminDep,
) -> Location:
    """Set a location's verification status, e.g. clearing a flag back to normal."""
    return verification.set_status(db, admin, location_id, payload.status)
