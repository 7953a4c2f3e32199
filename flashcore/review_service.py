"""
Review Service

Orchestrates a review submission across the scheduler and the repositories:

1. Load the card and the user's FSRS parameters
2. Make sure today's stable snapshot exists (taken before the card moves)
3. Schedule the review and persist card + review log
4. Record the completion if the card was part of today's snapshot

The scheduler, aggregation engine and stable-count tracker stay pure; all
I/O happens here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from flashcore import stable_counts
from flashcore.cards import Card
from flashcore.filtering.due_window import local_date
from flashcore.filtering.engine import aggregate
from flashcore.filtering.types import AggregationResult, FilterConfig
from flashcore.fsrs.memory_state import ensure_datetime
from flashcore.fsrs.scheduler import ReviewLog, process_review
from flashcore.logging_config import get_logger
from flashcore.ratings import Rating
from flashcore.repos import card_repo, review_log_repo, settings_repo, snapshot_repo
from flashcore.stable_counts import Snapshot

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of a submitted review."""
    card: Card
    log: ReviewLog
    snapshot: Snapshot
    counted: bool  # card was due when today's snapshot was taken


@dataclass(frozen=True)
class CountsView:
    """Real-time aggregation next to today's stable snapshot."""
    aggregation: AggregationResult
    snapshot: Snapshot

    def stable_remaining(self, category: str, sub_category: Optional[str] = None) -> int:
        return stable_counts.remaining(self.snapshot, category, sub_category)


def _resolve_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc).astimezone()
    return ensure_datetime(now, "now")


def _todays_snapshot(
    user_id: str,
    now: datetime,
    cards: Optional[list[Card]] = None
) -> tuple[Snapshot, bool]:
    """
    Load today's snapshot, or build it from the user's cards.

    Returns:
        (snapshot, created) where created means it still has to be saved
    """
    existing = snapshot_repo.load_snapshot(user_id, local_date(now))
    if existing is not None:
        return existing, False

    if cards is None:
        cards = card_repo.load_cards(user_id)
    return stable_counts.get_or_init_snapshot(cards, now), True


def submit_review(
    user_id: str,
    card_id: str,
    rating: Rating | str,
    now: Optional[datetime] = None
) -> ReviewOutcome:
    """
    Apply a review to a stored card.

    Args:
        user_id: Owner of the card
        card_id: Card being reviewed
        rating: again / hard / good / easy
        now: Review timestamp (defaults to the current local time)

    Returns:
        ReviewOutcome with the updated card, its log and today's snapshot

    Raises:
        InvalidRatingError: rating is not one of the four values
        InvalidTimestampError: now is not a datetime
        CardNotFoundError: the card does not exist
        InvalidDocumentError: the stored card cannot be parsed
    """
    rating = Rating.parse(rating)
    now = _resolve_now(now)

    card = card_repo.get_card(user_id, card_id)
    params = settings_repo.get_fsrs_params(user_id)
    snapshot, _ = _todays_snapshot(user_id, now)

    updated, log = process_review(card, rating, now, params=params)
    card_repo.save_schedule(user_id, updated)
    review_log_repo.log_review(user_id, log)

    counted = stable_counts.was_counted(snapshot, card.id)
    if counted:
        snapshot = stable_counts.record_completion(snapshot, card)
    snapshot_repo.save_snapshot(user_id, snapshot)

    logger.info(
        "User %s reviewed card %s as %s; next review in %d days (counted=%s)",
        user_id, card.id, rating.value, updated.interval, counted,
    )
    return ReviewOutcome(card=updated, log=log, snapshot=snapshot, counted=counted)


def load_counts(
    user_id: str,
    filter_config: Optional[FilterConfig] = None,
    now: Optional[datetime] = None
) -> CountsView:
    """
    Aggregate the user's cards and fetch today's stable snapshot.

    A missing or stale snapshot is created from the same card list and saved.
    """
    now = _resolve_now(now)
    filter_config = filter_config or FilterConfig()

    cards = card_repo.load_cards(user_id)
    aggregation = aggregate(cards, filter_config, now)

    snapshot, created = _todays_snapshot(user_id, now, cards=cards)
    if created:
        snapshot_repo.save_snapshot(user_id, snapshot)

    logger.info(
        "Counts for user %s: %d visible, %d stable remaining",
        user_id, aggregation.total, stable_counts.remaining_total(snapshot),
    )
    return CountsView(aggregation=aggregation, snapshot=snapshot)
