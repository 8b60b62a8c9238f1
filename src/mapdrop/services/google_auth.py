"""Google ID-token verification through the tokeninfo endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from mapdrop.core.settings import settings
from mapdrop.services.errors import UnauthorizedError

logger = logging.getLogger(__name__)

HTTP_OK = 200
_TRUSTED_ISSUERS = frozenset({"accounts.google.com", "https://accounts.google.com"})


@dataclass(frozen=True)
class GoogleIdentity:
    """Claims extracted from a verified Google ID token."""

    subject: str
    email: str
    name: str | None = None


async def verify_id_token(id_token: str, *, client: httpx.AsyncClient | None = None) -> GoogleIdentity:
    """Ask Google to validate ``id_token`` and return its identity claims.

    Raises:
        UnauthorizedError: sign-in is not configured, Google rejected the
            token, or the token was issued for a different client.
    """
    if not settings.google_client_id:
        raise UnauthorizedError("Google sign-in is not configured")

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=settings.google_http_timeout_seconds)
    try:
        response = await client.get(settings.google_tokeninfo_url, params={"id_token": id_token})
    except httpx.HTTPError as err:
        logger.warning("Google tokeninfo request failed: %s", err)
        raise UnauthorizedError("Authentication failed") from err
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code != HTTP_OK:
        raise UnauthorizedError("Authentication failed")

    claims = response.json()
    if claims.get("aud") != settings.google_client_id:
        raise UnauthorizedError("Authentication failed")
    if claims.get("iss") not in _TRUSTED_ISSUERS:
        raise UnauthorizedError("Authentication failed")
    email = claims.get("email")
    subject = claims.get("sub")
    if not email or not subject:
        raise UnauthorizedError("Authentication failed")

    return GoogleIdentity(subject=subject, email=email, name=claims.get("name"))
