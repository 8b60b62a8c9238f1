"""Password hashing and access-token helpers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import nacl.pwhash
from jose import jwt
from nacl.exceptions import InvalidkeyError

from mapdrop.core.settings import settings


def hash_password(password: str) -> str:
    """Return an Argon2id hash string for ``password``."""
    return nacl.pwhash.str(password.encode("utf-8")).decode("ascii")


def verify_password(password_hash: str | None, password: str) -> bool:
    """Check ``password`` against a stored Argon2id hash.

    Accounts without a password (Google sign-in only) never match.
    """
    if not password_hash:
        return False
    try:
        return nacl.pwhash.verify(password_hash.encode("ascii"), password.encode("utf-8"))
    except InvalidkeyError:
        return False


def create_access_token(user_id: int, *, is_admin: bool = False) -> str:
    """Create a JWT carrying the user id as ``sub`` and the admin flag."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "is_admin": is_admin,
        "exp": expire,
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT, raising ``jose.JWTError`` when invalid."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
