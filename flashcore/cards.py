"""
Card model.

Per-card scheduling state plus the one label-normalization function every
consumer goes through.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from flashcore.ratings import Level


UNCATEGORIZED = "Uncategorized"
ALL = "All"


def normalize_label(raw: Optional[str]) -> str:
    """
    Normalize a category or subcategory label.

    None, empty and whitespace-only labels become "Uncategorized". Anything
    else is returned unchanged: case and surrounding whitespace are kept, so
    "AWS" and "aws" remain two different categories.
    """
    if raw is None:
        return UNCATEGORIZED
    if not isinstance(raw, str):
        raw = str(raw)
    if not raw.strip():
        return UNCATEGORIZED
    return raw


def sub_category_key(category: str, sub_category: str) -> str:
    """Composite "category::subcategory" key used by per-category maps."""
    return f"{category}::{sub_category}"


@dataclass
class Card:
    """
    Scheduling state for a single flashcard.

    Labels are stored raw; read them through ``category_label`` and
    ``sub_category_label``.
    """
    id: str
    category: Optional[str] = None
    sub_category: Optional[str] = None
    active: bool = True
    starred: bool = False

    # FSRS memory state
    difficulty: float = 5.0     # D, range 1-10
    stability: float = 2.0      # S, in days
    ease_factor: float = 2.5    # legacy, display only
    interval: int = 1           # days until next review

    # Review tracking
    repetitions: int = 0        # successful reviews
    review_count: int = 0       # all reviews
    due_date: Optional[datetime] = None  # None means due since the epoch
    last_reviewed: Optional[datetime] = None
    created_at: Optional[datetime] = None

    level: Optional[Level] = None

    # Content (only used for ordering)
    question: str = ""
    answer: str = ""

    @property
    def category_label(self) -> str:
        return normalize_label(self.category)

    @property
    def sub_category_label(self) -> str:
        return normalize_label(self.sub_category)

    @property
    def sub_category_key(self) -> str:
        return sub_category_key(self.category_label, self.sub_category_label)
