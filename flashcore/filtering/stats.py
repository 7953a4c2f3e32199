"""
Category statistics and study-progression helpers.

All helpers count active cards only and use the shared due window.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Iterable, Optional

from flashcore.cards import ALL, Card
from flashcore.filtering.due_window import end_of_day, is_due_today, is_overdue, start_of_day
from flashcore.filtering.types import LabelStats
from flashcore.fsrs.memory_state import ensure_datetime


def _active(cards: Iterable[Card]) -> list[Card]:
    return [card for card in cards if card.active is not False]


def _tally(cards: Iterable[Card], now: datetime, key) -> dict[str, LabelStats]:
    totals: dict[str, int] = defaultdict(int)
    dues: dict[str, int] = defaultdict(int)
    for card in _active(cards):
        label = key(card)
        totals[label] += 1
        if is_due_today(card, now):
            dues[label] += 1
    return {label: LabelStats(total=totals[label], due=dues[label]) for label in totals}


def category_stats(cards: Iterable[Card], now: datetime) -> dict[str, LabelStats]:
    """
    Total and due-today counts per category.
    """
    return _tally(cards, now, lambda card: card.category_label)


def sub_category_stats(
    cards: Iterable[Card],
    now: datetime,
    category: str = ALL
) -> dict[str, LabelStats]:
    """
    Total and due-today counts per subcategory, optionally within one category.
    """
    if category != ALL:
        cards = [card for card in cards if card.category_label == category]
    return _tally(cards, now, lambda card: card.sub_category_label)


def all_sub_category_stats(cards: Iterable[Card], now: datetime) -> dict[str, LabelStats]:
    """
    Total and due-today counts keyed by "category::subcategory".
    """
    return _tally(cards, now, lambda card: card.sub_category_key)


def next_sub_category_with_least_cards(
    cards: Iterable[Card],
    category: str,
    current_sub_category: str,
    now: datetime
) -> Optional[str]:
    """
    Pick the subcategory to study next within a category.

    Candidates have at least one due card and are not the current
    subcategory. The one with the fewest total cards wins; ties go to the
    label that sorts first.

    Returns:
        Subcategory label, or None when nothing else is due
    """
    stats = sub_category_stats(cards, now, category=category)
    candidates = [
        (entry.total, label)
        for label, entry in stats.items()
        if entry.due > 0 and label != current_sub_category
    ]
    if not candidates:
        return None
    return min(candidates)[1]


def next_category_with_least_cards(
    cards: Iterable[Card],
    current_category: str,
    now: datetime
) -> Optional[str]:
    """
    Pick the category with the fewest due cards, excluding the current one.

    Returns:
        Category label, or None when no other category has due cards
    """
    stats = category_stats(cards, now)
    candidates = [
        (entry.due, label)
        for label, entry in stats.items()
        if entry.due > 0 and label != current_category
    ]
    if not candidates:
        return None
    return min(candidates)[1]


def next_category_with_due_cards(
    cards: Iterable[Card],
    current_category: str,
    now: datetime
) -> Optional[str]:
    """
    Walk categories with due cards in alphabetical order.

    From "All" (or a category with nothing due) the first due category is
    returned. From any other category the next one is returned, or None once
    the walk wraps around.
    """
    due_categories = sorted(
        label for label, entry in category_stats(cards, now).items() if entry.due > 0
    )
    if not due_categories:
        return None
    if current_category == ALL or current_category not in due_categories:
        return due_categories[0]

    next_index = due_categories.index(current_category) + 1
    if next_index >= len(due_categories):
        return None
    return due_categories[next_index]


def cards_due_today(cards: Iterable[Card], now: datetime) -> list[Card]:
    """Active cards due before the end of today."""
    return [card for card in _active(cards) if is_due_today(card, now)]


def past_due_cards(cards: Iterable[Card], now: datetime) -> list[Card]:
    """Active cards that were due before today started."""
    return [card for card in _active(cards) if is_overdue(card, now)]


def cards_reviewed_today(cards: Iterable[Card], now: datetime) -> list[Card]:
    """Cards whose last review falls within today."""
    now = ensure_datetime(now, "now")
    start, end = start_of_day(now), end_of_day(now)
    return [
        card for card in cards
        if card.last_reviewed is not None
        and start <= ensure_datetime(card.last_reviewed, "last_reviewed") < end
    ]
