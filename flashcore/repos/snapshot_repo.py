"""
MongoDB repository for stable-count snapshots.

One document per (user, date). Saves replace the whole document.
"""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError
from pymongo.collection import Collection

from flashcore import config
from flashcore.logging_config import get_logger
from flashcore.repos.mongo import get_collection
from flashcore.schemas import SnapshotDocument
from flashcore.stable_counts import Snapshot

logger = get_logger(__name__)


def _collection(collection: Optional[Collection]) -> Collection:
    if collection is not None:
        return collection
    return get_collection(config.SNAPSHOTS_COLLECTION)


def load_snapshot(
    user_id: str,
    date: str,
    collection: Optional[Collection] = None
) -> Optional[Snapshot]:
    """
    Load the snapshot for a user and date (YYYY-MM-DD).

    Returns:
        Snapshot, or None when none exists or the stored one is unreadable
    """
    doc = _collection(collection).find_one({"userId": user_id, "date": date})
    if doc is None:
        return None
    try:
        return SnapshotDocument.model_validate(doc).to_snapshot()
    except ValidationError as exc:
        logger.warning("Discarding unreadable snapshot for %s on %s: %s", user_id, date, exc)
        return None


def save_snapshot(user_id: str, snapshot: Snapshot, collection: Optional[Collection] = None) -> None:
    """Upsert the snapshot document for its date."""
    doc = SnapshotDocument.from_snapshot(snapshot, user_id).model_dump(by_alias=True)
    _collection(collection).replace_one(
        {"userId": user_id, "date": snapshot.date},
        doc,
        upsert=True
    )
