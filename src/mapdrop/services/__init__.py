"""Business logic services for the MapDrop application.

The vote ledger, point aggregator, verification state machine and badge
evaluator live in :mod:`ledger`, :mod:`points`, :mod:`verification` and
:mod:`badges`; the remaining modules are the CRUD surface around them.
"""

from . import accounts, admin, badges, ledger, locations, points, verification
from .errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    MapDropError,
    NotFoundError,
    UnauthorizedError,
)

__all__ = [
    "accounts",
    "admin",
    "badges",
    "ledger",
    "locations",
    "points",
    "verification",
    "ConflictError",
    "ForbiddenError",
    "InvalidInputError",
    "MapDropError",
    "NotFoundError",
    "UnauthorizedError",
]
