"""CRUD helpers for geotagged locations."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Final

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from mapdrop.core.settings import settings
from mapdrop.db.time import utcnow
from mapdrop.models import Location, User
from mapdrop.services.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)

__all__ = [
    "compute_delete_at",
    "create_location",
    "delete_location",
    "get_location",
    "list_locations",
    "list_user_locations",
    "purge_expired",
    "remove_media",
    "update_location",
]

logger = logging.getLogger(__name__)

DELETE_UNITS: Final[dict[str, str]] = {
    "minutes": "minutes",
    "hours": "hours",
    "days": "days",
}


def compute_delete_at(now: datetime, amount: int | None, unit: str | None) -> datetime:
    """Return the auto-delete deadline ``amount`` ``unit``s after ``now``."""
    if amount is None or amount <= 0:
        raise InvalidInputError("Auto-delete time must be a positive integer")
    if unit not in DELETE_UNITS:
        raise InvalidInputError(f"Unknown auto-delete unit: {unit!r}")
    try:
        return now + timedelta(**{DELETE_UNITS[unit]: amount})
    except OverflowError as err:
        raise InvalidInputError("Auto-delete time is out of range") from err


def _check_media(media_urls: Sequence[str], media_types: Sequence[str]) -> None:
    if len(media_urls) != len(media_types):
        raise InvalidInputError("Each media reference needs exactly one media type")
    if len(media_urls) > settings.max_media_per_location:
        raise InvalidInputError(
            f"At most {settings.max_media_per_location} media items per location"
        )


def _check_coordinates(latitude: float, longitude: float) -> None:
    if not -90.0 <= latitude <= 90.0:
        raise InvalidInputError("Latitude must be between -90 and 90")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidInputError("Longitude must be between -180 and 180")


def _lock_user(db: Session, user_id: int) -> User | None:
    # Re-read the balance under FOR UPDATE so concurrent creates cannot both spend it.
    return (
        db.query(User)
        .filter(User.id == user_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def _ensure_can_modify(actor: User, location: Location) -> None:
    if not actor.is_admin and location.creator_id != actor.id:
        raise ForbiddenError("Not allowed to modify this location")


def get_location(db: Session, location_id: int) -> Location:
    """Return a location or raise ``NotFoundError``."""
    location = db.get(Location, location_id)
    if location is None:
        raise NotFoundError("Location not found")
    return location


def list_locations(db: Session, viewer: User, *, profile: bool = False) -> list[Location]:
    """List locations newest first.

    The map shows everything; the profile view narrows to the viewer's own
    locations unless the viewer is an admin.
    """
    query = db.query(Location)
    if profile and not viewer.is_admin:
        query = query.filter(Location.creator_id == viewer.id)
    return query.order_by(desc(Location.created_at), desc(Location.id)).all()


def list_user_locations(db: Session, user_id: int) -> list[Location]:
    """Return every location created by ``user_id``, newest first."""
    return (
        db.query(Location)
        .filter(Location.creator_id == user_id)
        .order_by(desc(Location.created_at), desc(Location.id))
        .all()
    )


def create_location(
    db: Session,
    creator: User,
    *,
    latitude: float,
    longitude: float,
    text: str = "",
    media_urls: Sequence[str] = (),
    media_types: Sequence[str] = (),
    is_anonymous: bool = False,
    credits: int = 0,
    auto_delete: bool = False,
    delete_time: int | None = None,
    delete_unit: str | None = None,
    now: datetime | None = None,
) -> Location:
    """Persist a new location and move ``credits`` from the creator's balance to it.

    Raises:
        InvalidInputError: bad coordinates, unpaired media, an auto-delete
            request without a valid duration, or a credit amount outside
            ``0..creator.credits``.
    """
    _check_coordinates(latitude, longitude)
    _check_media(media_urls, media_types)
    if len(text) > settings.max_text_length:
        raise InvalidInputError(f"Text is limited to {settings.max_text_length} characters")
    if credits < 0:
        raise InvalidInputError("Credits must not be negative")

    now = now or utcnow()
    delete_at = compute_delete_at(now, delete_time, delete_unit) if auto_delete else None

    creator_id = creator.id
    creator = _lock_user(db, creator_id)
    if creator is None:
        raise NotFoundError("User not found")
    if credits > creator.credits:
        raise InvalidInputError("Not enough credits")

    location = Location(
        creator_id=creator.id,
        latitude=latitude,
        longitude=longitude,
        text=text,
        media_urls=list(media_urls),
        media_types=list(media_types),
        is_anonymous=is_anonymous,
        credits=credits,
        auto_delete=auto_delete,
        delete_at=delete_at,
        created_at=now,
        updated_at=now,
    )
    creator.credits -= credits
    db.add(location)
    try:
        db.commit()
    except (IntegrityError, OperationalError) as err:
        db.rollback()
        logger.warning("Location for user %s could not be saved: %s", creator_id, err)
        raise ConflictError("Credit balance changed concurrently; retry") from err
    db.refresh(location)
    logger.info("User %s created location %s", creator_id, location.id)
    return location


def update_location(
    db: Session,
    actor: User,
    location_id: int,
    *,
    text: str | None = None,
    is_anonymous: bool | None = None,
    add_media_urls: Sequence[str] = (),
    add_media_types: Sequence[str] = (),
    delete_media_indexes: Sequence[int] = (),
) -> Location:
    """Edit a location's content; coordinates and vote counters are untouched.

    New media is appended first, then the given indexes are dropped from
    the combined list. Concurrent edits are last-writer-wins.
    """
    location = get_location(db, location_id)
    _ensure_can_modify(actor, location)

    if len(add_media_urls) != len(add_media_types):
        raise InvalidInputError("Each media reference needs exactly one media type")

    media_urls = list(location.media_urls or []) + list(add_media_urls)
    media_types = list(location.media_types or []) + list(add_media_types)
    if delete_media_indexes:
        dropped = set(delete_media_indexes)
        media_urls = [url for index, url in enumerate(media_urls) if index not in dropped]
        media_types = [kind for index, kind in enumerate(media_types) if index not in dropped]
    _check_media(media_urls, media_types)

    if text is not None:
        if len(text) > settings.max_text_length:
            raise InvalidInputError(f"Text is limited to {settings.max_text_length} characters")
        location.text = text
    if is_anonymous is not None:
        location.is_anonymous = is_anonymous
    # Reassign so the JSON columns register as changed.
    location.media_urls = media_urls
    location.media_types = media_types

    db.commit()
    db.refresh(location)
    return location


def remove_media(db: Session, actor: User, location_id: int, media_index: int) -> Location:
    """Drop one media entry (and its type tag) by position."""
    location = get_location(db, location_id)
    _ensure_can_modify(actor, location)

    media_urls = list(location.media_urls or [])
    if not 0 <= media_index < len(media_urls):
        raise InvalidInputError("Invalid media index")

    media_types = list(location.media_types or [])
    del media_urls[media_index]
    del media_types[media_index]
    location.media_urls = media_urls
    location.media_types = media_types

    db.commit()
    db.refresh(location)
    return location


def delete_location(db: Session, actor: User, location_id: int) -> None:
    """Remove a location together with its votes."""
    location = get_location(db, location_id)
    _ensure_can_modify(actor, location)
    db.delete(location)
    db.commit()
    logger.info("User %s deleted location %s", actor.id, location_id)


def purge_expired(db: Session, now: datetime | None = None) -> int:
    """Delete auto-delete locations whose deadline has passed.

    Returns the number of locations removed.
    """
    now = now or utcnow()
    expired = (
        db.query(Location)
        .filter(Location.auto_delete.is_(True), Location.delete_at <= now)
        .all()
    )
    for location in expired:
        db.delete(location)
    db.commit()
    if expired:
        logger.info("Purged %d expired locations", len(expired))
    return len(expired)
