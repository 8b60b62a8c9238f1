"""Typed failures raised by the service layer.

Every service operation either completes its mutation or raises one of these
after rolling back; the API layer maps them onto HTTP status codes.
"""

from __future__ import annotations


class MapDropError(RuntimeError):
    """Base exception for service-level failures."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(MapDropError):
    """A referenced location or user does not exist."""

    status_code = 404


class UnauthorizedError(MapDropError):
    """The caller's identity is missing or does not resolve to an account."""

    status_code = 401


class ForbiddenError(MapDropError):
    """The caller is known but lacks rights for the operation."""

    status_code = 403


class ConflictError(MapDropError):
    """A concurrent update could not be serialized; retry the whole operation."""

    status_code = 409


class InvalidInputError(MapDropError):
    """Malformed direction, coordinates, credit amount or similar input."""

    status_code = 400
