"""
Scheduler - FSRS Algorithm Logic

Pure FSRS scheduling and state updates (no database calls).

Main workflow:
1. Validate rating and timestamp at the boundary
2. Compute elapsed days since the last review
3. Update difficulty, stability and interval
4. Return a new card (input card is never modified)

Database I/O is handled by the repos package.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional, Tuple

from flashcore.cards import Card
from flashcore.fsrs import updates
from flashcore.fsrs.constants import (
    D_MAX,
    D_MIN,
    EASE_MIN,
    LEVEL_AGAIN_DIFFICULTY,
    LEVEL_EASY_DIFFICULTY,
    LEVEL_EASY_EASE,
    LEVEL_GOOD_INTERVAL,
    LEVEL_HARD_DIFFICULTY,
    S_MIN,
    Level,
    Rating,
)
from flashcore.fsrs.memory_state import elapsed_days_since, ensure_datetime, finite_or
from flashcore.fsrs.params import DEFAULT_PARAMS, FSRSParameters
from flashcore.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReviewLog:
    """
    Record of a single review, ready to persist.
    """
    card_id: str
    rating: Rating
    reviewed_at: datetime
    elapsed_days: float
    scheduled_days: int
    difficulty_before: float
    difficulty_after: float
    stability_before: float
    stability_after: float
    category: str
    sub_category: str


def schedule(
    card: Card,
    rating: Rating | str,
    now: datetime,
    params: FSRSParameters = DEFAULT_PARAMS,
    rng: Optional[random.Random] = None,
    record_level: bool = False
) -> Card:
    """
    Compute the card state after a review.

    Args:
        card: Current card state (not modified)
        rating: AGAIN, HARD, GOOD or EASY
        now: Review timestamp
        params: FSRS parameter set
        rng: Source for interval fuzz; defaults to a generator seeded by
            (card.id, review_count) so the jitter is reproducible
        record_level: Store the rating as the card's level instead of
            clearing it

    Returns:
        New Card with updated schedule

    Raises:
        InvalidRatingError: rating is not one of the four values
        InvalidTimestampError: now is not a datetime
    """
    rating = Rating.parse(rating)
    now = ensure_datetime(now, "now")

    difficulty = updates.clamp(finite_or(card.difficulty, params.initial_difficulty), D_MIN, D_MAX)
    stability = max(S_MIN, finite_or(card.stability, params.initial_stability))
    ease_factor = max(EASE_MIN, finite_or(card.ease_factor, 2.5))

    is_new_card = card.last_reviewed is None
    reference = card.created_at if is_new_card else card.last_reviewed
    elapsed = elapsed_days_since(reference, now)

    new_difficulty = updates.update_difficulty(difficulty, rating, params)
    new_stability = updates.update_stability(stability, new_difficulty, elapsed, rating, params)

    if rating == Rating.AGAIN:
        interval = int(updates.clamp(params.initial_again_interval, 1, params.maximum_interval))
    else:
        if rng is None:
            rng = random.Random(f"{card.id}:{card.review_count}")
        fuzz = rng.random() * 2.0 - 1.0
        candidates = updates.candidate_intervals(stability, difficulty, elapsed, is_new_card, params)
        interval = updates.fuzz_interval(candidates[rating], fuzz, params)

    logger.debug(
        "Scheduled card %s as %s: D %.2f -> %.2f, S %.2f -> %.2f, interval %d",
        card.id, rating.value, difficulty, new_difficulty, stability, new_stability, interval,
    )

    return replace(
        card,
        difficulty=new_difficulty,
        stability=new_stability,
        ease_factor=updates.update_ease_factor(ease_factor, rating),
        interval=interval,
        repetitions=card.repetitions + (0 if rating == Rating.AGAIN else 1),
        review_count=card.review_count + 1,
        due_date=now + timedelta(days=interval),
        last_reviewed=now,
        level=Level(rating.value) if record_level else None,
    )


def process_review(
    card: Card,
    rating: Rating | str,
    now: datetime,
    params: FSRSParameters = DEFAULT_PARAMS,
    rng: Optional[random.Random] = None,
    record_level: bool = False
) -> Tuple[Card, ReviewLog]:
    """
    Schedule a review and return the updated card plus its review log.

    Caller is responsible for persisting both.
    """
    rating = Rating.parse(rating)
    now = ensure_datetime(now, "now")
    reference = card.created_at if card.last_reviewed is None else card.last_reviewed

    updated = schedule(card, rating, now, params=params, rng=rng, record_level=record_level)

    log = ReviewLog(
        card_id=card.id,
        rating=rating,
        reviewed_at=now,
        elapsed_days=elapsed_days_since(reference, now),
        scheduled_days=updated.interval,
        difficulty_before=finite_or(card.difficulty, params.initial_difficulty),
        difficulty_after=updated.difficulty,
        stability_before=finite_or(card.stability, params.initial_stability),
        stability_after=updated.stability,
        category=card.category_label,
        sub_category=card.sub_category_label,
    )
    return updated, log


def infer_level(card: Card) -> Level:
    """
    Display level for a card.

    An explicit level wins. Otherwise, first match in order:
    difficulty >= 8 -> again; difficulty >= 7 -> hard;
    difficulty <= 3 and ease >= 2.8 -> easy; interval >= 4 -> good; else new.
    """
    if card.level is not None:
        return Level(card.level)

    difficulty = finite_or(card.difficulty, 5.0)
    ease_factor = finite_or(card.ease_factor, 2.5)
    interval = finite_or(card.interval, 1.0)

    if difficulty >= LEVEL_AGAIN_DIFFICULTY:
        return Level.AGAIN
    if difficulty >= LEVEL_HARD_DIFFICULTY:
        return Level.HARD
    if difficulty <= LEVEL_EASY_DIFFICULTY and ease_factor >= LEVEL_EASY_EASE:
        return Level.EASY
    if interval >= LEVEL_GOOD_INTERVAL:
        return Level.GOOD
    return Level.NEW
