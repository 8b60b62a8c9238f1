# src/mapdrop/api/v1/endpoints/auth.py
"""Authentication endpoints for the MapDrop API."""

from __future__ import annotations

from fastapi import APIRouter, status

from mapdrop.api.v1.dependencies import SessionDep
from mapdrop.core.security import create_access_token
from mapdrop.models import User
from mapdrop.schemas.user import (
    GoogleLoginRequest,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)
from mapdrop.services import accounts, google_auth

router = APIRouter(prefix="/auth", tags=["authentication"])


def _token_response(user: User) -> TokenResponse:
    token = create_access_token(user.id, is_admin=user.is_admin)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
async def register(payload: RegisterRequest, db: SessionDep) -> RegisterResponse:
    """Create a password account."""
    user = accounts.register_user(
        db,
        email=payload.email,
        password=payload.password,
        name=payload.name,
    )
    return RegisterResponse(
        message="User created successfully",
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: SessionDep) -> TokenResponse:
    """Exchange email and password for an access token."""
    user = accounts.authenticate(db, email=payload.email, password=payload.password)
    return _token_response(user)


@router.post("/google", response_model=TokenResponse)
async def google_login(payload: GoogleLoginRequest, db: SessionDep) -> TokenResponse:
    """Sign in with a Google ID token, creating the account on first use."""
    identity = await google_auth.verify_id_token(payload.token)
    user = accounts.upsert_google_user(db, identity)
    return _token_response(user)
