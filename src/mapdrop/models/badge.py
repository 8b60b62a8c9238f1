# src/mapdrop/models/badge.py
"""Badge grants recorded per user."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mapdrop.db.session import Base
from mapdrop.db.time import utcnow

if TYPE_CHECKING:
    from .user import User


class UserBadge(Base):
    """Append-only record that a badge rule was satisfied by a user.

    The autoincrement id preserves grant order; the unique constraint keeps
    each badge to a single grant per user.
    """

    __tablename__ = "user_badge"
    __table_args__ = (UniqueConstraint("user_id", "badge_id", name="uq_user_badge"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    badge_id: Mapped[str] = mapped_column(String(64), nullable=False)
    granted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user: Mapped[User] = relationship("User", back_populates="badges")
