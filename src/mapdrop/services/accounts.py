"""Account registration, login and lookup."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mapdrop.core import security
from mapdrop.core.settings import settings
from mapdrop.models import User
from mapdrop.services.errors import ConflictError, InvalidInputError, NotFoundError, UnauthorizedError
from mapdrop.services.google_auth import GoogleIdentity

__all__ = [
    "authenticate",
    "get_user",
    "normalize_email",
    "register_user",
    "upsert_google_user",
]

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(db: Session, user_id: int) -> User:
    """Return a user by primary key or raise ``NotFoundError``."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def register_user(db: Session, *, email: str, password: str, name: str | None) -> User:
    """Create a password account seeded with the configured starting credits."""
    if _find_by_email(db, email) is not None:
        raise InvalidInputError("User already exists")

    user = User(
        email=normalize_email(email),
        password_hash=security.hash_password(password),
        display_name=name,
        credits=settings.starting_credits,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("User already exists") from err
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, *, email: str, password: str) -> User:
    """Return the account matching the credentials or raise ``UnauthorizedError``."""
    user = _find_by_email(db, email)
    if user is None or not security.verify_password(user.password_hash, password):
        raise UnauthorizedError("Invalid credentials")
    return user


def upsert_google_user(db: Session, identity: GoogleIdentity) -> User:
    """Find the account for a verified Google identity, creating it on first sign-in."""
    user = db.query(User).filter(User.google_id == identity.subject).first()
    if user is None:
        user = _find_by_email(db, identity.email)
        if user is None:
            user = User(
                email=normalize_email(identity.email),
                display_name=identity.name,
                credits=settings.starting_credits,
            )
            db.add(user)
        user.google_id = identity.subject
        try:
            db.commit()
        except IntegrityError as err:
            db.rollback()
            raise ConflictError("Account changed concurrently; retry") from err
        db.refresh(user)
        logger.info("Linked Google identity to user %s", user.id)
    return user
