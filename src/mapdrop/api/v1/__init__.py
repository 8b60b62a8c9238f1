"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    auth_router,
    badges_router,
    locations_router,
    users_router,
    votes_router,
)

__all__ = [
    "admin_router",
    "auth_router",
    "badges_router",
    "locations_router",
    "users_router",
    "votes_router",
]
