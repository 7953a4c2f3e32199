"""
Types for filtering and aggregation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from flashcore.cards import ALL, Card
from flashcore.ratings import Level


class CardSort(str, Enum):
    """Ordering of visible cards."""
    ALPHABETICAL = "alphabetical"   # by question text
    MOST_DUE = "most-due"           # earliest due date first
    LEAST_DUE = "least-due"         # latest due date first


@dataclass(frozen=True)
class FilterConfig:
    """
    Active filter selection from the UI.
    """
    selected_category: str = ALL
    selected_sub_category: str = ALL
    show_due_today_only: bool = False
    show_starred_only: bool = False
    selected_level: str = ALL
    sort_by: CardSort = CardSort.ALPHABETICAL


@dataclass(frozen=True)
class LabelStats:
    """Active card total and due-today count for one label."""
    total: int = 0
    due: int = 0


@dataclass(frozen=True)
class AggregationResult:
    """
    Visible cards plus every list and count derived from them.

    All counts come from ``visible_cards`` in a single pass.
    """
    visible_cards: list[Card]
    categories: list[str]
    sub_categories: list[str]
    category_counts: dict[str, int]
    sub_category_counts: dict[str, int]
    sub_category_counts_by_category: dict[str, int]  # "category::subcategory" keys
    level_counts: dict[Level, int]

    @property
    def total(self) -> int:
        return len(self.visible_cards)
