"""
Stable-count tracking.

Real-time due counts shift during a session as time passes and sibling cards
are completed. A snapshot freezes the due counts once per calendar day; the
session then reports ``initial - completed`` for each category and
subcategory.

Stable and real-time counts may drift apart within a day (a card's due date
or active flag can change after the snapshot). They reconcile when the
snapshot resets on the next day; the drift is not corrected in between.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, Optional

from flashcore.cards import ALL, Card, sub_category_key
from flashcore.filtering.due_window import local_date
from flashcore.filtering.engine import aggregate
from flashcore.filtering.types import FilterConfig
from flashcore.fsrs.memory_state import ensure_datetime
from flashcore.logging_config import get_logger

logger = get_logger(__name__)

SNAPSHOT_FILTER = FilterConfig(selected_category=ALL, show_due_today_only=True)


@dataclass(frozen=True)
class Snapshot:
    """
    Due-count baseline for one user on one calendar day.
    """
    date: str  # YYYY-MM-DD, local to the session
    initial_due_by_category: dict[str, int] = field(default_factory=dict)
    initial_due_by_sub_category: dict[str, int] = field(default_factory=dict)  # "cat::sub"
    completed_by_category: dict[str, int] = field(default_factory=dict)
    completed_by_sub_category: dict[str, int] = field(default_factory=dict)
    counted_card_ids: frozenset[str] = frozenset()


def build_snapshot(cards: Iterable[Card], now: datetime) -> Snapshot:
    """
    Take a fresh snapshot of today's due counts.
    """
    now = ensure_datetime(now, "now")
    result = aggregate(cards, SNAPSHOT_FILTER, now)
    snapshot = Snapshot(
        date=local_date(now),
        initial_due_by_category=dict(result.category_counts),
        initial_due_by_sub_category=dict(result.sub_category_counts_by_category),
        counted_card_ids=frozenset(card.id for card in result.visible_cards),
    )
    logger.info(
        "Stable snapshot for %s: %d due cards across %d categories",
        snapshot.date, len(snapshot.counted_card_ids), len(snapshot.initial_due_by_category),
    )
    return snapshot


def get_or_init_snapshot(
    cards: Iterable[Card],
    now: datetime,
    existing: Optional[Snapshot] = None
) -> Snapshot:
    """
    Return today's snapshot, creating one if needed.

    Args:
        cards: Full card collection
        now: Current timestamp; its calendar date identifies "today"
        existing: Previously stored snapshot, if any

    Returns:
        existing unchanged when it belongs to today, otherwise a new snapshot
    """
    now = ensure_datetime(now, "now")
    if existing is not None and existing.date == local_date(now):
        return existing
    if existing is not None:
        logger.info("Stable snapshot from %s is stale, resetting", existing.date)
    return build_snapshot(cards, now)


def was_counted(snapshot: Snapshot, card_id: str) -> bool:
    """True when the card was due at the time the snapshot was taken."""
    return card_id in snapshot.counted_card_ids


def record_completion(snapshot: Snapshot, card: Card) -> Snapshot:
    """
    Return a new snapshot with one more completion for the card's labels.

    Completed counts may exceed the initial counts; ``remaining`` clamps.
    """
    category = card.category_label
    key = sub_category_key(category, card.sub_category_label)

    by_category = dict(snapshot.completed_by_category)
    by_category[category] = by_category.get(category, 0) + 1

    by_sub_category = dict(snapshot.completed_by_sub_category)
    by_sub_category[key] = by_sub_category.get(key, 0) + 1

    return replace(
        snapshot,
        completed_by_category=by_category,
        completed_by_sub_category=by_sub_category,
    )


def remaining(
    snapshot: Snapshot,
    category: str,
    sub_category: Optional[str] = None
) -> int:
    """
    Stable remaining count for a category, or for one of its subcategories.

    Returns:
        max(0, initial - completed)
    """
    if sub_category is None:
        initial = snapshot.initial_due_by_category.get(category, 0)
        completed = snapshot.completed_by_category.get(category, 0)
    else:
        key = sub_category_key(category, sub_category)
        initial = snapshot.initial_due_by_sub_category.get(key, 0)
        completed = snapshot.completed_by_sub_category.get(key, 0)
    return max(0, initial - completed)


def remaining_total(snapshot: Snapshot) -> int:
    """Sum of stable remaining counts across all categories."""
    return sum(remaining(snapshot, category) for category in snapshot.initial_due_by_category)
