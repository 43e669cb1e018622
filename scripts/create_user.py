"""Create a user directly in the configured database.

Usage:
  python scripts/create_user.py --name Alice --email alice@example.com --password '...' --role admin
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from user_access_platform.config import load_settings
from user_access_platform.errors import AuthError
from user_access_platform.models.db import Database
from user_access_platform.models.user import UserRole
from user_access_platform.services.auth_service import AuthService
from user_access_platform.utils.logging_config import setup_logging


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--name", required=True)
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--role", choices=[r.value for r in UserRole], default=UserRole.user.value)
    args = ap.parse_args()

    settings = load_settings()
    setup_logging(log_level=settings.log_level, enable_file=False)

    database = Database(settings.database_url)
    database.init_db()
    try:
        service = AuthService(database, bcrypt_rounds=settings.bcrypt_rounds)
        try:
            user = service.create_user(
                name=args.name,
                email=args.email,
                password=args.password,
                role=UserRole(args.role),
            )
        except AuthError as exc:
            print(f"Could not create user: {exc.message}", file=sys.stderr)
            return 1
    finally:
        database.dispose()

    print(f"Created user: id={user.id} email={user.email} role={user.role.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
