"""
MongoDB repository for user settings.
"""

from __future__ import annotations

from typing import Optional

from pymongo.collection import Collection

from flashcore import config
from flashcore.fsrs.params import FSRSParameters, build_params
from flashcore.logging_config import get_logger
from flashcore.repos.mongo import get_collection

logger = get_logger(__name__)


def _collection(collection: Optional[Collection]) -> Collection:
    if collection is not None:
        return collection
    return get_collection(config.USER_SETTINGS_COLLECTION)


def get_fsrs_params(user_id: str, collection: Optional[Collection] = None) -> FSRSParameters:
    """
    FSRS parameters for a user: defaults merged with stored ``fsrsParams``.

    Raises:
        InvalidParametersError: if the stored overrides are out of range
    """
    doc = _collection(collection).find_one({"userId": user_id}, {"fsrsParams": 1})
    overrides = (doc or {}).get("fsrsParams") or {}
    if overrides:
        logger.info("Using %d stored FSRS overrides for user %s", len(overrides), user_id)
    return build_params(overrides)


def save_fsrs_params(
    user_id: str,
    params: FSRSParameters,
    collection: Optional[Collection] = None
) -> None:
    """Store a full parameter set under camelCase keys."""
    _collection(collection).update_one(
        {"userId": user_id},
        {"$set": {"fsrsParams": params.model_dump(by_alias=True, mode="json")}},
        upsert=True
    )
