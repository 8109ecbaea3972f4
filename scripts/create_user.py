"""Create a local console user.

Usage (from repository root):
python scripts/create_user.py --username admin --password secret --system-admin
python scripts/create_user.py --username jdoe --role operator

Calls `init_db()` to prepare the DB and then creates/updates the user with
`create_user`.
"""

import argparse
import os
import sys
from getpass import getpass

# Ensure src is on path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from navconsole.db import SessionLocal  # noqa: E402
from navconsole.db.init_db import init_db  # noqa: E402
from navconsole.models.role import Role  # noqa: E402
from navconsole.utils.auth import create_user  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--username", required=False)
    parser.add_argument("--password", required=False)
    parser.add_argument("--system-admin", action="store_true")
    parser.add_argument("--role", help="Name of the role to assign")
    args = parser.parse_args()

    username = args.username or input("username: ")
    password = args.password or getpass("password: ")

    # initialize DB (creates tables if needed)
    init_db()

    db = SessionLocal()
    try:
        role_id = None
        if args.role:
            role = db.query(Role).filter(Role.name == args.role).one_or_none()
            if role is None:
                parser.error(f"unknown role '{args.role}'")
            role_id = role.id
        user = create_user(db, username, password, is_system_admin=args.system_admin, role_id=role_id)
        print(f"Created/updated user: {user.username} (system_admin={user.is_system_admin}, role={args.role or '-'})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
