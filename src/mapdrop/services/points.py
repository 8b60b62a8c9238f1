"""Net score derivation for locations."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from mapdrop.models import Location, LocationVote
from mapdrop.models.vote import VOTE_DOWN, VOTE_UP


@dataclass(frozen=True)
class Tally:
    """Vote counts for one location as read from the ledger."""

    upvotes: int
    downvotes: int

    @property
    def total_points(self) -> int:
        return total_points(self.upvotes, self.downvotes)


def total_points(upvotes: int, downvotes: int) -> int:
    """Return the net score; may be negative."""
    return upvotes - downvotes


def tally(db: Session, location_id: int) -> Tally:
    """Count up/down votes for a location straight from ``location_vote``."""
    db.flush()
    upvotes, downvotes = db.query(
        func.coalesce(func.sum(case((LocationVote.direction == VOTE_UP, 1), else_=0)), 0),
        func.coalesce(func.sum(case((LocationVote.direction == VOTE_DOWN, 1), else_=0)), 0),
    ).filter(LocationVote.location_id == location_id).one()
    return Tally(upvotes=int(upvotes), downvotes=int(downvotes))


def refresh_points(db: Session, location: Location) -> int:
    """Re-derive the cached counters on ``location`` from the ledger.

    Returns the change in ``total_points`` relative to the cached value.
    Calling it again without intervening votes returns 0.
    """
    counts = tally(db, location.id)
    previous = location.total_points or 0
    location.upvotes = counts.upvotes
    location.downvotes = counts.downvotes
    location.total_points = counts.total_points
    return location.total_points - previous
