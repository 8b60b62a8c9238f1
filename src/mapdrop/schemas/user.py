"""User and authentication Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RegisterRequest(BaseModel):
    """Schema for creating a password account."""

    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=256)
    name: str | None = Field(None, max_length=200)


class LoginRequest(BaseModel):
    """Schema for password login."""

    email: str
    password: str


class GoogleLoginRequest(BaseModel):
    """Schema carrying a Google ID token from the client."""

    token: str = Field(..., min_length=1, description="Google ID token")


class UserResponse(BaseModel):
    """Schema for a user's own profile."""

    id: int
    email: str
    display_name: str | None
    credits: int
    is_admin: bool
    badges: list[str] = Field(default_factory=list)
    created_at: datetime

    @model_validator(mode="before")
    @classmethod
    def _flatten_badges(cls, data: object) -> object:
        if isinstance(data, dict):
            return data
        return {
            "id": data.id,
            "email": data.email,
            "display_name": data.display_name,
            "credits": data.credits,
            "is_admin": data.is_admin,
            "badges": data.badge_ids,
            "created_at": data.created_at,
        }

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Schema returned after a successful login."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class RegisterResponse(BaseModel):
    """Schema returned after registration."""

    message: str
    user: UserResponse
