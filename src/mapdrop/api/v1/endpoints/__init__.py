"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .badges import router as badges_router
from .locations import router as locations_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "admin_router",
    "auth_router",
    "badges_router",
    "locations_router",
    "users_router",
    "votes_router",
]
