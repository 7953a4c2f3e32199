"""
Filter & Aggregation Engine

One pipeline, shared by every consumer that needs visible cards or counts:

1. Drop inactive cards
2. Starred only (optional)
3. Selected category
4. Selected subcategory
5. Due today only (optional)
6. Selected level

Every count is derived from the same ``visible_cards`` list in one pass, so
the category counts always sum to the number of visible cards and each
category's subcategory counts sum to its category count.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Callable, Iterable, Optional

from flashcore.cards import ALL, Card, sub_category_key
from flashcore.filtering.due_window import card_due_date, is_due_today
from flashcore.filtering.types import AggregationResult, CardSort, FilterConfig
from flashcore.fsrs.memory_state import ensure_datetime
from flashcore.fsrs.scheduler import infer_level
from flashcore.logging_config import get_logger
from flashcore.ratings import Level

logger = get_logger(__name__)

Predicate = Callable[[Card], bool]


def _base_predicates(filter_config: FilterConfig) -> list[Predicate]:
    """Stages 1-2: active and starred."""
    stages: list[Predicate] = [lambda card: card.active is not False]
    if filter_config.show_starred_only:
        stages.append(lambda card: card.starred is True)
    return stages


def _due_predicate(filter_config: FilterConfig, now: datetime) -> Optional[Predicate]:
    """Stage 5, or None when the due filter is off."""
    if not filter_config.show_due_today_only:
        return None
    return lambda card: is_due_today(card, now)


def _apply(cards: Iterable[Card], predicates: list[Predicate]) -> list[Card]:
    return [card for card in cards if all(predicate(card) for predicate in predicates)]


def filter_cards(
    cards: Iterable[Card],
    filter_config: FilterConfig,
    now: datetime
) -> list[Card]:
    """
    Run the full pipeline and return matching cards in input order.
    """
    now = ensure_datetime(now, "now")
    predicates = _base_predicates(filter_config)

    if filter_config.selected_category != ALL:
        predicates.append(lambda card: card.category_label == filter_config.selected_category)
    if filter_config.selected_sub_category != ALL:
        predicates.append(lambda card: card.sub_category_label == filter_config.selected_sub_category)

    due = _due_predicate(filter_config, now)
    if due is not None:
        predicates.append(due)

    if filter_config.selected_level != ALL:
        predicates.append(lambda card: infer_level(card).value == filter_config.selected_level)

    return _apply(cards, predicates)


def sort_cards(cards: list[Card], sort_by: CardSort) -> list[Card]:
    """
    Order cards for a study queue. Ties keep input order.
    """
    if sort_by == CardSort.MOST_DUE:
        return sorted(cards, key=card_due_date)
    if sort_by == CardSort.LEAST_DUE:
        return sorted(cards, key=card_due_date, reverse=True)
    return sorted(cards, key=lambda card: (card.question or "").lower())


def _ordered_labels(counts: Counter) -> list[str]:
    """Labels by descending count, then by label."""
    return sorted(counts, key=lambda label: (-counts[label], label))


def aggregate(
    cards: Iterable[Card],
    filter_config: FilterConfig,
    now: datetime
) -> AggregationResult:
    """
    Compute visible cards, category/subcategory lists and all counts.

    Category list membership depends on the active and starred filters, plus
    the due filter when it is on; the current category selection never hides
    other categories. Subcategory lists follow the same rule within the
    selected category.

    Args:
        cards: Full card collection
        filter_config: Active filter selection
        now: Current timestamp; its timezone defines "today"

    Returns:
        AggregationResult with zero entries for listed labels that have no
        visible cards
    """
    now = ensure_datetime(now, "now")
    cards = list(cards)

    due = _due_predicate(filter_config, now)
    list_predicates = _base_predicates(filter_config)
    if due is not None:
        list_predicates.append(due)

    listed = _apply(cards, list_predicates)
    category_pool = Counter(card.category_label for card in listed)

    if filter_config.selected_category != ALL:
        listed = [card for card in listed if card.category_label == filter_config.selected_category]
    sub_category_pool = Counter(card.sub_category_label for card in listed)

    visible = sort_cards(filter_cards(cards, filter_config, now), filter_config.sort_by)

    categories = _ordered_labels(category_pool)
    sub_categories = _ordered_labels(sub_category_pool)

    category_counts = {label: 0 for label in categories}
    sub_category_counts = {label: 0 for label in sub_categories}
    sub_category_counts_by_category: dict[str, int] = {}
    level_counts = {level: 0 for level in Level}

    for card in visible:
        category = card.category_label
        sub_category = card.sub_category_label
        key = sub_category_key(category, sub_category)

        category_counts[category] = category_counts.get(category, 0) + 1
        sub_category_counts[sub_category] = sub_category_counts.get(sub_category, 0) + 1
        sub_category_counts_by_category[key] = sub_category_counts_by_category.get(key, 0) + 1
        level_counts[infer_level(card)] += 1

    logger.debug(
        "Aggregated %d/%d cards into %d categories, %d subcategories",
        len(visible), len(cards), len(categories), len(sub_categories),
    )

    return AggregationResult(
        visible_cards=visible,
        categories=categories,
        sub_categories=sub_categories,
        category_counts=category_counts,
        sub_category_counts=sub_category_counts,
        sub_category_counts_by_category=sub_category_counts_by_category,
        level_counts=level_counts,
    )
