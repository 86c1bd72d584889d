"""
Database module - PostgreSQL and MongoDB connections.
"""
from experience_portal.db.postgres import get_db_session, init_sql_schema, test_postgres_connection
from experience_portal.db.mongodb import get_mongo_db, init_mongo_indexes, test_mongo_connection

__all__ = [
    "get_db_session",
    "init_sql_schema",
    "test_postgres_connection",
    "get_mongo_db",
    "init_mongo_indexes",
    "test_mongo_connection"
]
