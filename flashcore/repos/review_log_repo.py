"""
MongoDB repository for review logs.

Append-only history of reviews. Analytics read it back as plain dicts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pymongo import ASCENDING
from pymongo.collection import Collection

from flashcore import config
from flashcore.fsrs.scheduler import ReviewLog
from flashcore.logging_config import get_logger
from flashcore.repos.mongo import get_collection
from flashcore.schemas import review_log_document

logger = get_logger(__name__)


def _collection(collection: Optional[Collection]) -> Collection:
    if collection is not None:
        return collection
    return get_collection(config.REVIEW_LOGS_COLLECTION)


def log_review(user_id: str, log: ReviewLog, collection: Optional[Collection] = None) -> str:
    """
    Append a review log.

    Returns:
        Inserted document id as a string
    """
    result = _collection(collection).insert_one(review_log_document(log, user_id))
    logger.info("Logged %s review of card %s", log.rating.value, log.card_id)
    return str(result.inserted_id)


def get_review_logs(
    user_id: str,
    since: Optional[datetime] = None,
    collection: Optional[Collection] = None
) -> list[dict]:
    """
    Review logs for a user, oldest first.

    Args:
        user_id: Owner of the logs
        since: Only return reviews at or after this timestamp
        collection: Optional collection override

    Returns:
        List of review log documents (without ``_id``)
    """
    query: dict = {"userId": user_id}
    if since is not None:
        query["reviewedAt"] = {"$gte": since}

    cursor = _collection(collection).find(query, {"_id": 0}).sort("reviewedAt", ASCENDING)
    return list(cursor)
