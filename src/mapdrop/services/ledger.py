"""Vote ledger: one up/down vote per (user, location) pair."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from mapdrop.models import Location, LocationVote, User
from mapdrop.models.vote import VOTE_DOWN, VOTE_UP
from mapdrop.services.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from mapdrop.services.points import refresh_points
from mapdrop.services.verification import apply_transition

logger = logging.getLogger(__name__)

DIRECTION_UP = "up"
DIRECTION_DOWN = "down"

_DIRECTION_VALUES = {DIRECTION_UP: VOTE_UP, DIRECTION_DOWN: VOTE_DOWN}
_DIRECTION_NAMES = {value: name for name, value in _DIRECTION_VALUES.items()}


@dataclass(frozen=True)
class VoteOutcome:
    """Result of casting a vote.

    ``previous_direction`` is None for a first vote. ``previous_status`` is
    set only when the vote moved the location to a new verification status.
    """

    previous_direction: str | None
    applied_direction: str
    location: Location
    changed: bool
    previous_status: str | None = None


def parse_direction(direction: str) -> int:
    """Map ``"up"``/``"down"`` onto the stored vote value."""
    try:
        return _DIRECTION_VALUES[direction]
    except (KeyError, TypeError) as err:
        raise InvalidInputError(f"Invalid vote direction: {direction!r}") from err


def direction_name(value: int) -> str:
    """Map a stored vote value back onto ``"up"``/``"down"``."""
    return _DIRECTION_NAMES[value]


def _lock_location(db: Session, location_id: int) -> Location | None:
    # FOR UPDATE serializes concurrent voters on backends that support it.
    return (
        db.query(Location)
        .filter(Location.id == location_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def cast_vote(db: Session, user_id: int | None, location_id: int, direction: str) -> VoteOutcome:
    """Record ``user_id``'s vote on ``location_id``.

    Re-casting the direction already held is a no-op. Switching direction
    updates the existing row in place. Counters, total points and
    verification status are re-derived and committed together with the
    ledger change.

    Raises:
        InvalidInputError: ``direction`` is not ``"up"`` or ``"down"``.
        UnauthorizedError: ``user_id`` does not resolve to an account.
        NotFoundError: the location does not exist.
        ConflictError: the update could not be serialized against a
            concurrent one; nothing was written.
    """
    value = parse_direction(direction)

    user = db.get(User, user_id) if user_id is not None else None
    if user is None:
        raise UnauthorizedError("User not found")

    location = _lock_location(db, location_id)
    if location is None:
        raise NotFoundError("Location not found")

    existing = (
        db.query(LocationVote)
        .filter(
            LocationVote.location_id == location_id,
            LocationVote.voter_user_id == user.id,
        )
        .first()
    )

    if existing is not None and existing.direction == value:
        return VoteOutcome(
            previous_direction=direction,
            applied_direction=direction,
            location=location,
            changed=False,
        )

    previous_direction = None
    try:
        if existing is None:
            db.add(LocationVote(location_id=location_id, voter_user_id=user.id, direction=value))
        else:
            previous_direction = direction_name(existing.direction)
            existing.direction = value

        refresh_points(db, location)
        previous_status = apply_transition(location)
        db.commit()
    except (IntegrityError, OperationalError) as err:
        db.rollback()
        logger.warning(
            "Vote by user %s on location %s could not be serialized: %s",
            user_id,
            location_id,
            err,
        )
        raise ConflictError("Vote conflicted with a concurrent update; retry") from err

    db.refresh(location)
    return VoteOutcome(
        previous_direction=previous_direction,
        applied_direction=direction,
        location=location,
        changed=True,
        previous_status=previous_status,
    )


def get_vote_direction(db: Session, user_id: int, location_id: int) -> str | None:
    """Return the caller's current direction on a location, if any."""
    vote = (
        db.query(LocationVote)
        .filter(
            LocationVote.location_id == location_id,
            LocationVote.voter_user_id == user_id,
        )
        .first()
    )
    if vote is None:
        return None
    return direction_name(vote.direction)
