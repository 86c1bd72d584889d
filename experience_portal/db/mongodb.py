"""
MongoDB Connection Utility

MongoDB stores:
- Interview experiences (with embedded rounds and questions)
- Company name standardizations (canonical name + variations)

Rounds and their questions are embedded in the experience document;
variations are stored as an array on the standardization document.
"""
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection

from experience_portal.core.config import get_settings
from experience_portal.core.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            tz_aware=False,
        )
    return _client


def get_mongo_db() -> Database:
    """
    Get the portal database.

    Also used as a FastAPI dependency, so tests can override it:
        app.dependency_overrides[get_mongo_db] = lambda: mongomock_db
    """
    return get_mongo_client()[settings.mongodb_db]


# Collection name constants (avoid typos)
COLLECTIONS = {
    "experiences": "experiences",
    "company_standardizations": "company_standardizations",
}


def get_collection(name: str, db: Database = None) -> Collection:
    """Get a specific collection by its COLLECTIONS key."""
    db = db if db is not None else get_mongo_db()
    return db[COLLECTIONS[name]]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        client.admin.command("ping")
        return True
    except Exception as e:
        logger.warning(f"MongoDB connection failed: {e}")
        return False


def init_mongo_indexes(db: Database = None):
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    experiences = get_collection("experiences", db)
    experiences.create_index([("moderation_status", ASCENDING), ("created_at", DESCENDING)])
    experiences.create_index("author_id")
    experiences.create_index("company")

    # One document per canonical name
    get_collection("company_standardizations", db).create_index("standard_name", unique=True)

    logger.info("MongoDB indexes created successfully")
