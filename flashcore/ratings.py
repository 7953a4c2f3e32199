"""
Review ratings and display levels.
"""

from __future__ import annotations

from enum import Enum

from flashcore.errors import InvalidRatingError


class Rating(str, Enum):
    """User feedback on a review."""
    AGAIN = "again"  # Retrieval failed
    HARD = "hard"    # Retrieved with high effort
    GOOD = "good"    # Retrieved normally
    EASY = "easy"    # Retrieved fluently

    @classmethod
    def parse(cls, value: object) -> "Rating":
        """
        Convert a boundary value into a Rating.

        Accepts a Rating or its exact string value. Anything else is rejected,
        never coerced.

        Raises:
            InvalidRatingError: if value is not one of the four ratings
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidRatingError(
            f"Invalid rating {value!r}; expected one of {[r.value for r in cls]}"
        )


class Level(str, Enum):
    """Display/statistics label for a card."""
    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"
    NEW = "new"
