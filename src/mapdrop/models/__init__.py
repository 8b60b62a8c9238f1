# src/mapdrop/models/__init__.py
"""SQLAlchemy models for the MapDrop application."""

from .badge import UserBadge
from .location import Location
from .user import User
from .vote import LocationVote

__all__ = [
    "Location",
    "LocationVote",
    "User",
    "UserBadge",
]
