"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .admin import AdminUserResponse, MessageResponse, StatusOverride
from .badge import BadgeCheckResponse, BadgeRuleResponse
from .location import LocationCreate, LocationResponse, LocationUpdate
from .user import (
    GoogleLoginRequest,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)
from .vote import MyVoteResponse, VoteCreate, VoteResponse

__all__ = [
    "AdminUserResponse", "MessageResponse", "StatusOverride",
    "BadgeCheckResponse", "BadgeRuleResponse",
    "LocationCreate", "LocationResponse", "LocationUpdate",
    "GoogleLoginRequest", "LoginRequest", "RegisterRequest", "RegisterResponse",
    "TokenResponse", "UserResponse",
    "MyVoteResponse", "VoteCreate", "VoteResponse",
]
