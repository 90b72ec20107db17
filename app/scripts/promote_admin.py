"""
Grant (or revoke with --revoke) the admin role for an existing account.
Usage: python -m app.scripts.promote_admin user@example.com [--revoke]
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from app.database import SessionLocal, ensure_tables_exist
from app.repos.user_repo import get_by_email, set_role


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Change an account's admin role.")
    parser.add_argument("email", help="Email the account registered with")
    parser.add_argument("--revoke", action="store_true", help="Demote the admin back to applicant")
    args = parser.parse_args(argv)

    target_role = "applicant" if args.revoke else "admin"
    ensure_tables_exist()
    db = SessionLocal()
    try:
        user = get_by_email(db, args.email.strip())
        if not user:
            print(f"No account registered as {args.email}", file=sys.stderr)
            return 1
        if user.role == target_role:
            print(f"{user.email} already has role {target_role}; nothing to do.")
            return 0
        previous = user.role
        set_role(db, user.id, target_role)
        print(f"{user.email}: {previous} -> {target_role}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
