"""Grant or revoke the admin flag for an existing account."""
from __future__ import annotations

import argparse
import sys

from mapdrop.db.session import SessionLocal
from mapdrop.models import User
from mapdrop.services.accounts import normalize_email


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email", help="Email address of the account")
    parser.add_argument("--revoke", action="store_true", help="Remove admin rights instead")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == normalize_email(args.email)).first()
        if user is None:
            print(f"No account for {args.email}", file=sys.stderr)
            return 1
        user.is_admin = not args.revoke
        db.commit()
    finally:
        db.close()

    print(f"{args.email}: is_admin={not args.revoke}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
