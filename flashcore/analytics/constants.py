"""
Constants for progress analytics.
"""

from __future__ import annotations

from typing import Final

from flashcore.ratings import Rating


DAILY_GOAL: Final[int] = 20                  # Cards per day
WEEKLY_GOAL: Final[int] = 100                # Cards per week
STREAK_THRESHOLD: Final[int] = 5             # Days
RETENTION_CALCULATION_DAYS: Final[int] = 30

RECALLED_RATINGS: Final[list[str]] = [Rating.HARD.value, Rating.GOOD.value, Rating.EASY.value]

REVIEW_LOG_COLUMNS: Final[list[str]] = [
    "card_id", "rating", "reviewed_at", "category", "sub_category",
]
