# src/mapdrop/models/location.py
"""SQLAlchemy models for geotagged locations."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mapdrop.db.session import Base
from mapdrop.db.time import utcnow

if TYPE_CHECKING:
    from .user import User
    from .vote import LocationVote

STATUS_NORMAL = "normal"
STATUS_PENDING = "pending"
STATUS_VERIFIED = "verified"
STATUS_FLAGGED = "flagged"

VERIFICATION_STATUSES = (STATUS_NORMAL, STATUS_PENDING, STATUS_VERIFIED, STATUS_FLAGGED)


class Location(Base):
    """A geotagged post dropped on the map.

    ``upvotes``/``downvotes``/``total_points`` are a materialized view over
    ``location_vote`` and are only written by the vote ledger.
    """

    __tablename__ = "locations"
    __table_args__ = (
        CheckConstraint("upvotes >= 0", name="ck_locations_upvotes_non_negative"),
        CheckConstraint("downvotes >= 0", name="ck_locations_downvotes_non_negative"),
        CheckConstraint("credits >= 0", name="ck_locations_credits_non_negative"),
        CheckConstraint(
            "verification_status IN ('normal', 'pending', 'verified', 'flagged')",
            name="ck_locations_verification_status",
        ),
        Index("ix_locations_creator_id", "creator_id"),
        Index("ix_locations_delete_at", "delete_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    creator_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Coordinates are fixed at creation.
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)

    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Paired lists: media_types[i] describes media_urls[i].
    media_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    media_types: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    verification_status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=STATUS_NORMAL
    )

    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    auto_delete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    delete_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    creator: Mapped[User] = relationship("User", back_populates="locations")
    votes: Mapped[list[LocationVote]] = relationship(
        "LocationVote",
        back_populates="location",
        cascade="all, delete-orphan",
    )

    @property
    def content(self) -> dict[str, Any]:
        """Return the post body in the shape the map client consumes."""
        return {
            "text": self.text,
            "media_urls": list(self.media_urls or []),
            "media_types": list(self.media_types or []),
            "is_anonymous": self.is_anonymous,
        }
