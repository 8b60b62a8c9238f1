"""Verification state machine for locations.

``normal`` may move to ``pending``, ``verified`` or ``flagged``; ``pending``
may move to ``verified`` or ``flagged``; ``verified`` may only move to
``flagged``. Nothing moves back to ``normal`` on its own, only through
:func:`set_status` by an administrator.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from mapdrop.core.settings import settings
from mapdrop.models import Location, User
from mapdrop.models.location import (
    STATUS_FLAGGED,
    STATUS_NORMAL,
    STATUS_PENDING,
    STATUS_VERIFIED,
    VERIFICATION_STATUSES,
)
from mapdrop.services.errors import ForbiddenError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


def next_status(
    current: str,
    points: int,
    *,
    flag_threshold: int | None = None,
    pending_threshold: int | None = None,
    verification_threshold: int | None = None,
) -> str:
    """Return the status a location with ``points`` should move to.

    Thresholds default to the configured values.
    """
    if flag_threshold is None:
        flag_threshold = settings.flag_threshold
    if pending_threshold is None:
        pending_threshold = settings.pending_threshold
    if verification_threshold is None:
        verification_threshold = settings.verification_threshold

    if points < flag_threshold:
        return STATUS_FLAGGED
    if current in (STATUS_NORMAL, STATUS_PENDING) and points >= verification_threshold:
        return STATUS_VERIFIED
    if current == STATUS_NORMAL and points >= pending_threshold:
        return STATUS_PENDING
    return current


def apply_transition(location: Location) -> str | None:
    """Move ``location`` to the status its points call for.

    Returns the previous status when a transition happened, otherwise None.
    """
    current = location.verification_status
    target = next_status(current, location.total_points)
    if target == current:
        return None
    location.verification_status = target
    logger.info(
        "Location %s moved from %s to %s at %d points",
        location.id,
        current,
        target,
        location.total_points,
    )
    return current


def set_status(db: Session, actor: User, location_id: int, status: str) -> Location:
    """Administrator override of a location's verification status."""
    if not actor.is_admin:
        raise ForbiddenError("Admin access denied")
    if status not in VERIFICATION_STATUSES:
        raise InvalidInputError(f"Unknown verification status: {status}")

    location = db.get(Location, location_id)
    if location is None:
        raise NotFoundError("Location not found")

    previous = location.verification_status
    location.verification_status = status
    db.commit()
    db.refresh(location)
    logger.info(
        "Admin %s set location %s status from %s to %s",
        actor.id,
        location_id,
        previous,
        status,
    )
    return location
