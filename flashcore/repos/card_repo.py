"""
MongoDB repository for flashcards.

Loads card documents into ``Card`` values and writes back the scheduling
fields produced by the scheduler.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError
from pymongo.collection import Collection

from flashcore import config
from flashcore.cards import Card
from flashcore.errors import CardNotFoundError, InvalidDocumentError
from flashcore.logging_config import get_logger
from flashcore.repos.mongo import get_collection
from flashcore.schemas import CardDocument, card_schedule_fields

logger = get_logger(__name__)


def _collection(collection: Optional[Collection]) -> Collection:
    if collection is not None:
        return collection
    return get_collection(config.FLASHCARDS_COLLECTION)


def load_cards(user_id: str, collection: Optional[Collection] = None) -> list[Card]:
    """
    Load all cards for a user.

    Documents that fail validation are skipped and logged.

    Args:
        user_id: Owner of the cards
        collection: Optional collection override

    Returns:
        List of Card values
    """
    cards = []
    skipped = 0
    for doc in _collection(collection).find({"userId": user_id}):
        try:
            cards.append(CardDocument.model_validate(doc).to_card())
        except ValidationError as exc:
            skipped += 1
            logger.warning("Skipping malformed card %s: %s", doc.get("_id"), exc)

    logger.info("Loaded %d cards for user %s (%d skipped)", len(cards), user_id, skipped)
    return cards


def get_card(user_id: str, card_id: str, collection: Optional[Collection] = None) -> Card:
    """
    Load a single card.

    Raises:
        CardNotFoundError: if no card with this id belongs to the user
        InvalidDocumentError: if the stored card cannot be parsed
    """
    doc = _collection(collection).find_one({"_id": card_id, "userId": user_id})
    if doc is None:
        raise CardNotFoundError(f"Card with ID {card_id} not found")
    try:
        return CardDocument.model_validate(doc).to_card()
    except ValidationError as exc:
        logger.warning("Card %s is malformed: %s", card_id, exc)
        raise InvalidDocumentError(f"Card with ID {card_id} is malformed") from exc


def save_schedule(user_id: str, card: Card, collection: Optional[Collection] = None) -> None:
    """
    Persist the scheduling fields of a reviewed card.

    Raises:
        CardNotFoundError: if the card no longer exists
    """
    update = card_schedule_fields(card)
    update["lastModified"] = datetime.now(timezone.utc)

    result = _collection(collection).update_one(
        {"_id": card.id, "userId": user_id},
        {"$set": update}
    )
    if result.matched_count == 0:
        raise CardNotFoundError(f"Card with ID {card.id} not found")


def set_starred(
    user_id: str,
    card_id: str,
    starred: bool,
    collection: Optional[Collection] = None
) -> None:
    """
    Set a card's starred flag.

    Raises:
        CardNotFoundError: if the card does not exist
    """
    result = _collection(collection).update_one(
        {"_id": card_id, "userId": user_id},
        {"$set": {"starred": starred, "lastModified": datetime.now(timezone.utc)}}
    )
    if result.matched_count == 0:
        raise CardNotFoundError(f"Card with ID {card_id} not found")
