"""
PostgreSQL Connection Utility

PostgreSQL stores the relational records:
- users (unique username/email enforced by constraints)
- comments on experiences
- reports filed against experiences
- announcements
"""
from contextlib import contextmanager
from sqlalchemy import (
    create_engine, text, MetaData, Table, Column, Integer, String, Text,
    Boolean, DateTime, func, true, false
)
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from experience_portal.core.config import get_settings
from experience_portal.core.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)


def _build_engine(url: str):
    if url.startswith("sqlite"):
        # Single shared connection so in-memory databases survive across sessions
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return create_engine(url, pool_size=5, max_overflow=10, pool_pre_ping=True)


engine = _build_engine(settings.sql_url)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ============================================================
# SCHEMA
# ============================================================

metadata = MetaData()

users_table = Table(
    "users", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("username", String(20), nullable=False, unique=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False, server_default="student"),
    Column("branch", String(100)),
    Column("graduation_year", Integer),
    Column("current_company", String(200)),
    Column("bio", String(500)),
    Column("linkedin", String(255)),
    Column("github", String(255)),
    Column("twitter", String(255)),
    Column("is_alumni", Boolean, nullable=False, server_default=false()),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    Column("updated_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

comments_table = Table(
    "comments", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("experience_id", String(24), nullable=False, index=True),
    Column("author_id", Integer, nullable=False),
    Column("content", Text, nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

reports_table = Table(
    "reports", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("experience_id", String(24), nullable=False, index=True),
    Column("reported_by", Integer, nullable=False),
    Column("reason", String(40), nullable=False),
    Column("description", Text),
    Column("status", String(20), nullable=False, server_default="pending"),
    Column("admin_notes", Text),
    Column("reviewed_by", Integer),
    Column("reviewed_at", DateTime),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

announcements_table = Table(
    "announcements", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(200), nullable=False),
    Column("content", Text, nullable=False),
    Column("type", String(20), nullable=False, server_default="general"),
    Column("priority", String(20), nullable=False, server_default="medium"),
    Column("published_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    Column("expires_at", DateTime),
    Column("is_active", Boolean, nullable=False, server_default=true()),
    Column("created_by", Integer),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
    Column("updated_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)


def init_sql_schema():
    """Create tables if they don't exist. Call once at startup."""
    metadata.create_all(engine)
    logger.info("SQL schema ready")


# ============================================================
# SESSIONS
# ============================================================

@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM users"))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_postgres_connection() -> bool:
    """
    Test if the relational database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        logger.warning(f"SQL connection failed: {e}")
        return False


def execute_raw_sql(sql, params: dict = None) -> list:
    """
    Execute raw SQL and return results as list of dicts.
    This is useful for list/filter queries.

    `sql` is a string or an already built text() clause (e.g. with typed bindparams).
    """
    statement = text(sql) if isinstance(sql, str) else sql
    with get_db_session() as db:
        result = db.execute(statement, params or {})
        columns = result.keys()
        return [dict(zip(columns, row)) for row in result.fetchall()]
