"""Remove auto-delete locations whose deadline has passed.

Meant to be run from cron or another external scheduler; the web process
never sweeps on its own.
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import UTC, datetime

from mapdrop.db.session import SessionLocal
from mapdrop.db.time import as_utc
from mapdrop.services.locations import purge_expired

logger = logging.getLogger("mapdrop.purge_expired")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        help="Override the current time (ISO 8601, assumed UTC when naive)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    now = as_utc(args.now).astimezone(UTC) if args.now is not None else None

    db = SessionLocal()
    try:
        removed = purge_expired(db, now)
    finally:
        db.close()

    print(f"Removed {removed} expired location(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
