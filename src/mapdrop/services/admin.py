"""Administrative queries and moderation actions."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

from sqlalchemy import desc, func, or_
from sqlalchemy.orm import Session

from mapdrop.models import Location, LocationVote, User
from mapdrop.services.errors import ForbiddenError, InvalidInputError, NotFoundError
from mapdrop.services.points import refresh_points
from mapdrop.services.verification import apply_transition

logger = logging.getLogger(__name__)

SEARCH_TYPES: Final[tuple[str, ...]] = ("locations", "users")
_LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class UserSummary:
    """A user row annotated with how many locations they created."""

    user: User
    location_count: int


def require_admin(actor: User) -> None:
    if not actor.is_admin:
        raise ForbiddenError("Admin access denied")


def _contains_pattern(term: str) -> str:
    """Build a LIKE pattern matching ``term`` literally anywhere in the value."""
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"


def _location_counts(db: Session):
    return (
        db.query(Location.creator_id.label("creator_id"), func.count(Location.id).label("total"))
        .group_by(Location.creator_id)
        .subquery()
    )


def _users_with_counts(db: Session):
    counts = _location_counts(db)
    return (
        db.query(User, func.coalesce(counts.c.total, 0))
        .outerjoin(counts, counts.c.creator_id == User.id)
        .order_by(desc(User.created_at), desc(User.id))
    )


def list_users(db: Session, actor: User) -> list[UserSummary]:
    """Return every user with a location count, newest accounts first."""
    require_admin(actor)
    return [UserSummary(user, int(total)) for user, total in _users_with_counts(db).all()]


def delete_user(db: Session, actor: User, user_id: int) -> None:
    """Remove a user, their locations and their votes.

    Locations the user had voted on keep a consistent score: their counters
    are re-derived from the remaining ledger rows in the same commit.
    """
    require_admin(actor)
    if user_id == actor.id:
        raise InvalidInputError("Cannot delete your own admin account")

    target = db.get(User, user_id)
    if target is None:
        raise NotFoundError("User not found")

    affected_ids = [
        row[0]
        for row in db.query(LocationVote.location_id)
        .join(Location, Location.id == LocationVote.location_id)
        .filter(LocationVote.voter_user_id == user_id, Location.creator_id != user_id)
        .all()
    ]

    db.delete(target)
    db.flush()

    for location in db.query(Location).filter(Location.id.in_(affected_ids)).with_for_update():
        refresh_points(db, location)
        apply_transition(location)

    db.commit()
    logger.info(
        "Admin %s deleted user %s; rescored %d locations",
        actor.id,
        user_id,
        len(affected_ids),
    )


def user_locations(db: Session, actor: User, user_id: int) -> list[Location]:
    """Return the locations created by ``user_id``, newest first."""
    require_admin(actor)
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found")
    return (
        db.query(Location)
        .filter(Location.creator_id == user_id)
        .order_by(desc(Location.created_at), desc(Location.id))
        .all()
    )


def search_locations(db: Session, actor: User, term: str) -> list[Location]:
    """Case-insensitive substring search over location text."""
    require_admin(actor)
    pattern = _contains_pattern(term)
    return (
        db.query(Location)
        .filter(Location.text.ilike(pattern, escape=_LIKE_ESCAPE))
        .order_by(desc(Location.created_at), desc(Location.id))
        .all()
    )


def search_users(db: Session, actor: User, term: str) -> list[UserSummary]:
    """Case-insensitive substring search over email and display name."""
    require_admin(actor)
    pattern = _contains_pattern(term)
    rows = (
        _users_with_counts(db)
        .filter(
            or_(
                User.email.ilike(pattern, escape=_LIKE_ESCAPE),
                User.display_name.ilike(pattern, escape=_LIKE_ESCAPE),
            )
        )
        .all()
    )
    return [UserSummary(user, int(total)) for user, total in rows]
