# src/mapdrop/models/user.py
"""SQLAlchemy models for user accounts."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mapdrop.db.session import Base
from mapdrop.db.time import utcnow

if TYPE_CHECKING:
    from .badge import UserBadge
    from .location import Location
    from .vote import LocationVote


class User(Base):
    """Account that owns locations, votes and badges."""

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("credits >= 0", name="ck_users_credits_non_negative"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    # Null for accounts created through Google sign-in only.
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    google_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    locations: Mapped[list[Location]] = relationship(
        "Location",
        back_populates="creator",
        cascade="all, delete-orphan",
    )
    votes: Mapped[list[LocationVote]] = relationship(
        "LocationVote",
        back_populates="voter",
        cascade="all, delete-orphan",
    )
    badges: Mapped[list[UserBadge]] = relationship(
        "UserBadge",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="UserBadge.id",
    )

    @property
    def badge_ids(self) -> list[str]:
        """Return granted badge identifiers in grant order."""
        return [badge.badge_id for badge in self.badges]
