"""Badge evaluation against a user's recorded activity."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mapdrop.models import Location, LocationVote, User, UserBadge
from mapdrop.models.vote import VOTE_DOWN, VOTE_UP
from mapdrop.services.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityTotals:
    """Aggregate counters a badge predicate is evaluated against."""

    locations_created: int = 0
    upvotes_received: int = 0
    downvotes_received: int = 0
    votes_cast: int = 0
    credits: int = 0

    @property
    def net_votes_received(self) -> int:
        return self.upvotes_received - self.downvotes_received


@dataclass(frozen=True)
class BadgeRule:
    """A badge identifier paired with the predicate that earns it."""

    badge_id: str
    title: str
    description: str
    predicate: Callable[[ActivityTotals], bool]


BADGE_RULES: Final[tuple[BadgeRule, ...]] = (
    BadgeRule(
        "locations_10",
        "Explorer",
        "Dropped 10 locations on the map",
        lambda t: t.locations_created >= 10,
    ),
    BadgeRule(
        "locations_50",
        "Cartographer",
        "Dropped 50 locations on the map",
        lambda t: t.locations_created >= 50,
    ),
    BadgeRule(
        "votes_cast_10",
        "Voter",
        "Voted on 10 locations",
        lambda t: t.votes_cast >= 10,
    ),
    BadgeRule(
        "votes_cast_100",
        "Critic",
        "Voted on 100 locations",
        lambda t: t.votes_cast >= 100,
    ),
    BadgeRule(
        "upvotes_received_50",
        "Local Favourite",
        "Received 50 upvotes across your locations",
        lambda t: t.upvotes_received >= 50,
    ),
    BadgeRule(
        "upvotes_received_250",
        "Landmark",
        "Received 250 upvotes across your locations",
        lambda t: t.upvotes_received >= 250,
    ),
    BadgeRule(
        "net_votes_100",
        "Trusted Source",
        "Reached a net score of 100 across your locations",
        lambda t: t.net_votes_received >= 100,
    ),
    BadgeRule(
        "credits_100",
        "Patron",
        "Hold 100 credits",
        lambda t: t.credits >= 100,
    ),
)

RULES_BY_ID: Final[dict[str, BadgeRule]] = {rule.badge_id: rule for rule in BADGE_RULES}


def collect_totals(db: Session, user: User) -> ActivityTotals:
    """Recount a user's activity from locations and the vote ledger."""
    locations_created = (
        db.query(func.count())
        .select_from(Location)
        .filter(Location.creator_id == user.id)
        .scalar()
        or 0
    )
    received = dict(
        db.query(LocationVote.direction, func.count())
        .join(Location, Location.id == LocationVote.location_id)
        .filter(Location.creator_id == user.id)
        .group_by(LocationVote.direction)
        .all()
    )
    votes_cast = (
        db.query(func.count())
        .select_from(LocationVote)
        .filter(LocationVote.voter_user_id == user.id)
        .scalar()
        or 0
    )
    return ActivityTotals(
        locations_created=int(locations_created),
        upvotes_received=int(received.get(VOTE_UP, 0)),
        downvotes_received=int(received.get(VOTE_DOWN, 0)),
        votes_cast=int(votes_cast),
        credits=user.credits,
    )


def held_badges(db: Session, user_id: int) -> list[str]:
    """Return badge identifiers already granted, in grant order."""
    rows = (
        db.query(UserBadge.badge_id)
        .filter(UserBadge.user_id == user_id)
        .order_by(UserBadge.id)
        .all()
    )
    return [row[0] for row in rows]


def evaluate(db: Session, user_id: int) -> list[str]:
    """Grant every badge whose rule the user now satisfies.

    Returns the newly granted identifiers in rule order; an empty list when
    nothing new applies, so repeated calls are harmless.

    Raises:
        NotFoundError: the user does not exist.
        ConflictError: a concurrent evaluation granted the same badge first;
            nothing from this call was kept.
    """
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")

    totals = collect_totals(db, user)
    held = set(held_badges(db, user.id))

    granted: list[str] = []
    for rule in BADGE_RULES:
        if rule.badge_id in held or not rule.predicate(totals):
            continue
        db.add(UserBadge(user_id=user.id, badge_id=rule.badge_id))
        granted.append(rule.badge_id)

    if not granted:
        return []

    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        logger.warning("Badge grant for user %s raced another evaluation: %s", user_id, err)
        raise ConflictError("Badge evaluation conflicted with a concurrent grant; retry") from err

    db.expire(user, ["badges"])
    logger.info("Granted badges %s to user %s", granted, user_id)
    return granted
