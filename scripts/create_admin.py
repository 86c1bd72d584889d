#!/usr/bin/env python3
"""
Provision an admin account.

Creates the user with role admin, or promotes the existing account that owns
the username or email (its password is reset to the one given).

Usage:
    python scripts/create_admin.py --name "Placement Cell" --username admin \
        --email admin@marwadiuniversity.ac.in
"""
import argparse
import getpass
import sys
sys.path.insert(0, '.')

from experience_portal.db.postgres import init_sql_schema
from experience_portal.schemas.schemas import normalize_username
from experience_portal.services.user_service import provision_admin


def parse_args():
    parser = argparse.ArgumentParser(description="Create or promote a portal admin")
    parser.add_argument("--name", required=True)
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", help="prompted for when omitted")
    return parser.parse_args()


def main():
    args = parse_args()
    try:
        username = normalize_username(args.username)
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    password = args.password or getpass.getpass("Admin password: ")
    if len(password) < 6:
        print("❌ Password must be at least 6 characters")
        return 1

    init_sql_schema()
    user = provision_admin(args.name, username, args.email, password)
    print(f"✅ Admin ready: {user['username']} (id={user['id']}, email={user['email']})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
