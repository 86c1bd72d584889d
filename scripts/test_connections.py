#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify both database connections are working.
Usage: python scripts/test_connections.py
"""
import sys
sys.path.insert(0, '.')

from experience_portal.db.postgres import test_postgres_connection
from experience_portal.db.mongodb import test_mongo_connection
from experience_portal.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("EXPERIENCE PORTAL - CONNECTION TEST")
    print("=" * 50)

    print("\n[1] Testing relational database...")
    if settings.database_url:
        print(f"    URL: {settings.database_url.split('@')[-1]}")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    sql_ok = test_postgres_connection()
    print("    ✅ SQL: CONNECTED" if sql_ok else "    ❌ SQL: FAILED")

    print("\n[2] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    mongo_ok = test_mongo_connection()
    print("    ✅ MongoDB: CONNECTED" if mongo_ok else "    ❌ MongoDB: FAILED")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)
    return 0 if sql_ok and mongo_ok else 1


if __name__ == "__main__":
    sys.exit(main())
