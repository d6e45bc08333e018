"""
Database utilities
------------------

Role:
- Provide a single entry-point to get MongoDB collections using PyMongo (sync).
- Own the lifecycle of the shared MongoClient (connect on first use, close on shutdown).
- Create the indexes the user services rely on (unique email).

Every user operation is a blocking call, so the synchronous driver is used
throughout. MongoClient is thread-safe and pools connections internally.
"""
import logging
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from ..core.config import get_settings
from ..domain.constants import UserFields

logger = logging.getLogger(__name__)

# Singleton client to avoid creating new connections on every call
_mongo_client: Optional[MongoClient] = None
_mongo_db: Optional[Database] = None


def get_client() -> MongoClient:
    """Get or create singleton MongoClient with connection timeouts (fail fast)."""
    global _mongo_client
    if _mongo_client is not None:
        return _mongo_client

    settings = get_settings()
    mongo_uri = settings.mongo_uri
    if not mongo_uri:
        raise RuntimeError("MONGO_URI not set. Please configure it in your .env file.")

    # Explicit timeouts so an unreachable server fails fast instead of hanging 30+ seconds
    client = MongoClient(
        mongo_uri,
        serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        connectTimeoutMS=settings.mongo_timeout_ms,
        tz_aware=True,
    )
    _mongo_client = client
    logger.info(f"MongoClient created for database '{settings.mongo_database_name}'")
    return _mongo_client


def get_database() -> Database:
    """
    Get MongoDB database instance (singleton pattern)

    Returns:
        MongoDB database configured by MONGO_DB_NAME
    """
    global _mongo_db
    if _mongo_db is None:
        _mongo_db = get_client()[get_settings().mongo_database_name]
    return _mongo_db


def get_collection(collection_name: str) -> Collection:
    """
    Get MongoDB collection (singleton client, sync PyMongo).

    Args:
        collection_name: Name of the collection

    Returns:
        MongoDB Collection object (synchronous PyMongo)
    """
    return get_database()[collection_name]


def get_user_collection() -> Collection:
    """Get the users collection configured by MONGO_USERS_COLLECTION."""
    return get_collection(get_settings().users_collection_name)


def ensure_user_indexes(collection: Collection) -> None:
    """
    Create the indexes the user services depend on.

    The unique index on email is what turns a second insert with the same
    address into a duplicate-key error. Without it duplicates are accepted.
    """
    collection.create_index([(UserFields.EMAIL, ASCENDING)], unique=True, name="email_unique")
    collection.create_index([(UserFields.DEPARTMENT, ASCENDING)], name="department_idx")
    logger.info(f"Indexes ensured on collection '{collection.name}'")


def close_client() -> None:
    """Close the singleton client (application shutdown)."""
    global _mongo_client, _mongo_db
    if _mongo_client is not None:
        _mongo_client.close()
        logger.info("MongoClient closed")
    _mongo_client = None
    _mongo_db = None
