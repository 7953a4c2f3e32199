"""
MongoDB connection management shared by the repositories.
"""

from __future__ import annotations

from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection

from flashcore import config
from flashcore.logging_config import get_logger

logger = get_logger(__name__)

# Global connection pool (reused across requests)
_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    """
    Get the process-wide MongoDB client.

    Uses a persistent connection pool that's reused across requests to avoid
    a cold start on every query. Documents come back with timezone-aware
    (UTC) datetimes.
    """
    global _client

    if _client is not None:
        return _client

    _client = MongoClient(
        config.get_mongo_uri(),
        tz_aware=True,
        maxPoolSize=10,  # Connection pool size
        minPoolSize=1,   # Keep at least 1 connection alive
        maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
    )
    logger.info("Connected MongoDB client for database %s", config.get_db_name())
    return _client


def get_collection(name: str) -> Collection:
    """Get a collection from the configured database."""
    return get_client()[config.get_db_name()][name]


def close_client() -> None:
    """Close the cached client (scripts call this on exit)."""
    global _client
    if _client is not None:
        _client.close()
        _client = None
