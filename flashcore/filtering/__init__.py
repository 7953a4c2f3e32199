"""
Filtering and aggregation exports.
"""

from flashcore.filtering.due_window import end_of_day, is_due_today, is_overdue, start_of_day
from flashcore.filtering.engine import aggregate, filter_cards, sort_cards
from flashcore.filtering.stats import (
    all_sub_category_stats,
    cards_due_today,
    cards_reviewed_today,
    category_stats,
    next_category_with_due_cards,
    next_category_with_least_cards,
    next_sub_category_with_least_cards,
    past_due_cards,
    sub_category_stats,
)
from flashcore.filtering.types import AggregationResult, CardSort, FilterConfig, LabelStats

__all__ = [
    "aggregate",
    "filter_cards",
    "sort_cards",
    "end_of_day",
    "start_of_day",
    "is_due_today",
    "is_overdue",
    "category_stats",
    "sub_category_stats",
    "all_sub_category_stats",
    "next_sub_category_with_least_cards",
    "next_category_with_least_cards",
    "next_category_with_due_cards",
    "cards_due_today",
    "past_due_cards",
    "cards_reviewed_today",
    "AggregationResult",
    "CardSort",
    "FilterConfig",
    "LabelStats",
]
