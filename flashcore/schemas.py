"""
Pydantic models for flashcard documents.

These models define the structure of MongoDB documents and convert them to
and from the in-memory ``Card`` used by the scheduler and engine. Parsing is
lenient: documents written by older app versions may miss fields, use
``sub_category`` instead of ``subCategory``, or carry nulls.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from flashcore.cards import Card
from flashcore.fsrs.memory_state import finite_or
from flashcore.fsrs.scheduler import ReviewLog
from flashcore.logging_config import get_logger
from flashcore.ratings import Level
from flashcore.stable_counts import Snapshot

logger = get_logger(__name__)

_LEVEL_VALUES = {level.value for level in Level}


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are UTC; attach tzinfo when the driver drops it."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---- Flashcards ----

class CardDocument(BaseModel):
    """
    A single flashcard document in the ``flashcards`` collection.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., validation_alias=AliasChoices("id", "_id"))
    user_id: Optional[str] = Field(None, validation_alias=AliasChoices("userId", "user_id"))

    question: Optional[str] = None
    answer: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = Field(
        None, validation_alias=AliasChoices("subCategory", "sub_category")
    )

    active: Optional[bool] = None
    starred: Optional[bool] = None

    difficulty: Optional[float] = None
    stability: Optional[float] = None
    ease_factor: Optional[float] = Field(None, validation_alias=AliasChoices("easeFactor", "ease_factor"))
    interval: Optional[float] = None
    repetitions: Optional[int] = None
    review_count: Optional[int] = Field(None, validation_alias=AliasChoices("reviewCount", "review_count"))

    due_date: Optional[datetime] = Field(None, validation_alias=AliasChoices("dueDate", "due_date"))
    last_reviewed: Optional[datetime] = Field(
        None, validation_alias=AliasChoices("lastReviewed", "last_reviewed")
    )
    created_at: Optional[datetime] = Field(None, validation_alias=AliasChoices("createdAt", "created_at"))

    level: Optional[Any] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("category", "sub_category", "question", "answer", mode="before")
    @classmethod
    def _stringify_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    def to_card(self) -> Card:
        """
        Convert to a Card, filling defaults for missing scheduling fields.
        """
        level = None
        if isinstance(self.level, str) and self.level in _LEVEL_VALUES:
            level = Level(self.level)
        elif self.level not in (None, ""):
            logger.warning("Card %s has unknown level %r; deriving it instead", self.id, self.level)

        return Card(
            id=self.id,
            category=self.category,
            sub_category=self.sub_category,
            active=self.active is not False,
            starred=self.starred is True,
            difficulty=finite_or(self.difficulty, 5.0),
            stability=finite_or(self.stability, 2.0),
            ease_factor=finite_or(self.ease_factor, 2.5),
            interval=int(round(finite_or(self.interval, 1.0))),
            repetitions=self.repetitions or 0,
            review_count=self.review_count or 0,
            due_date=_as_utc(self.due_date),
            last_reviewed=_as_utc(self.last_reviewed),
            created_at=_as_utc(self.created_at),
            level=level,
            question=self.question or "",
            answer=self.answer or "",
        )


def card_schedule_fields(card: Card) -> dict:
    """
    Scheduling fields of a card as a camelCase update document.
    """
    return {
        "difficulty": card.difficulty,
        "stability": card.stability,
        "easeFactor": card.ease_factor,
        "interval": card.interval,
        "repetitions": card.repetitions,
        "reviewCount": card.review_count,
        "dueDate": card.due_date,
        "lastReviewed": card.last_reviewed,
        "level": card.level.value if card.level is not None else None,
    }


# ---- Review logs ----

def review_log_document(log: ReviewLog, user_id: str) -> dict:
    """
    Review log as a ``reviewLogs`` document.
    """
    return {
        "userId": user_id,
        "cardId": log.card_id,
        "rating": log.rating.value,
        "reviewedAt": log.reviewed_at,
        "elapsedDays": log.elapsed_days,
        "scheduledDays": log.scheduled_days,
        "difficultyBefore": log.difficulty_before,
        "difficultyAfter": log.difficulty_after,
        "stabilityBefore": log.stability_before,
        "stabilityAfter": log.stability_after,
        "category": log.category,
        "subCategory": log.sub_category,
    }


# ---- Stable snapshots ----

class CountEntry(BaseModel):
    """One label/count pair (labels may contain characters Mongo keys cannot)."""
    key: str
    count: int = Field(0, ge=0)


class SnapshotDocument(BaseModel):
    """
    Stable-count snapshot for one user and day in ``stableSnapshots``.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(..., alias="userId")
    date: str
    initial_due_by_category: list[CountEntry] = Field(default_factory=list, alias="initialDueByCategory")
    initial_due_by_sub_category: list[CountEntry] = Field(default_factory=list, alias="initialDueBySubCategory")
    completed_by_category: list[CountEntry] = Field(default_factory=list, alias="completedByCategory")
    completed_by_sub_category: list[CountEntry] = Field(default_factory=list, alias="completedBySubCategory")
    counted_card_ids: list[str] = Field(default_factory=list, alias="countedCardIds")

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, user_id: str) -> "SnapshotDocument":
        def entries(counts: dict[str, int]) -> list[CountEntry]:
            return [CountEntry(key=key, count=count) for key, count in sorted(counts.items())]

        return cls(
            user_id=user_id,
            date=snapshot.date,
            initial_due_by_category=entries(snapshot.initial_due_by_category),
            initial_due_by_sub_category=entries(snapshot.initial_due_by_sub_category),
            completed_by_category=entries(snapshot.completed_by_category),
            completed_by_sub_category=entries(snapshot.completed_by_sub_category),
            counted_card_ids=sorted(snapshot.counted_card_ids),
        )

    def to_snapshot(self) -> Snapshot:
        def counts(entries: list[CountEntry]) -> dict[str, int]:
            return {entry.key: entry.count for entry in entries}

        return Snapshot(
            date=self.date,
            initial_due_by_category=counts(self.initial_due_by_category),
            initial_due_by_sub_category=counts(self.initial_due_by_sub_category),
            completed_by_category=counts(self.completed_by_category),
            completed_by_sub_category=counts(self.completed_by_sub_category),
            counted_card_ids=frozenset(self.counted_card_ids),
        )
