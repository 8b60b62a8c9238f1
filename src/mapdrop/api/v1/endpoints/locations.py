# src/mapdrop/api/v1/endpoints/locations.py
"""Location-related endpoints for the MapDrop API."""

from fastapi import APIRouter, Query, status

from mapdrop.api.v1.dependencies import CurrentUserDep, SessionDep
from mapdrop.models import Location
from mapdrop.schemas.admin import MessageResponse
from mapdrop.schemas.location import LocationCreate, LocationResponse, LocationUpdate
from mapdrop.services import locations as location_service

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("/", response_model=list[LocationResponse])
async def list_locations(
    db: SessionDep,
    current_user: CurrentUserDep,
    profile: bool = Query(False, description="Only the caller's own locations (admins see all)"),
) -> list[Location]:
    """List locations newest first.

    Args:
        db: Database session
        current_user: Authenticated caller
        profile: Restrict to the caller's locations unless the caller is an admin

    Returns:
        List of Location objects in descending creation order
    """
    return location_service.list_locations(db, current_user, profile=profile)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=LocationResponse)
async def create_location(
    payload: LocationCreate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> Location:
    """Drop a new location on the map."""
    return location_service.create_location(
        db,
        current_user,
        latitude=payload.latitude,
        longitude=payload.longitude,
        text=payload.text,
        media_urls=payload.media_urls,
        media_types=payload.media_types,
        is_anonymous=payload.is_anonymous,
        credits=payload.credits,
        auto_delete=payload.auto_delete,
        delete_time=payload.delete_time,
        delete_unit=payload.delete_unit,
    )


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(
    location_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> Location:
    """Get a specific location by ID."""
    return location_service.get_location(db, location_id)


@router.put("/{location_id}", response_model=LocationResponse)
async def update_location(
    location_id: int,
    payload: LocationUpdate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> Location:
    """Edit a location's text, anonymity or media (creator or admin only)."""
    return location_service.update_location(
        db,
        current_user,
        location_id,
        text=payload.text,
        is_anonymous=payload.is_anonymous,
        add_media_urls=payload.media_urls,
        add_media_types=payload.media_types,
        delete_media_indexes=payload.delete_media_indexes,
    )


@router.delete("/{location_id}", response_model=MessageResponse)
async def delete_location(
    location_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    """Delete a location (creator or admin only)."""
    location_service.delete_location(db, current_user, location_id)
    return MessageResponse(message="Location deleted successfully")
