# src/mapdrop/models/vote.py
"""Models capturing voting interactions on locations."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mapdrop.db.session import Base
from mapdrop.db.time import utcnow

if TYPE_CHECKING:
    from .location import Location
    from .user import User

VOTE_UP = 1
VOTE_DOWN = -1


class LocationVote(Base):
    """Per-user vote on a location; one row per (location, voter) pair."""

    __tablename__ = "location_vote"
    __table_args__ = (
        CheckConstraint("direction IN (1, -1)", name="ck_location_vote_direction"),
        Index("ix_location_vote_voter_user_id", "voter_user_id"),
    )

    location_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("locations.id", ondelete="CASCADE"),
        primary_key=True,
    )
    voter_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # Composite primary key prevents duplicate votes from the same user.

    # 1 = upvote, -1 = downvote.
    direction: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    location: Mapped[Location] = relationship("Location", back_populates="votes")
    voter: Mapped[User] = relationship("User", back_populates="votes")
