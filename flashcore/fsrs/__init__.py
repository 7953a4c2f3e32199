"""
FSRS - Free Spaced Repetition Scheduler

Review engine for the flashcard app.

This module implements an FSRS-style algorithm with:
- Difficulty / stability updates driven by a tunable weight vector
- Power forgetting curve: R = (1 + 19/81 * t/S) ^ -0.5
- Intervals targeting a requested retention, with reproducible fuzz
- Level inference for display and statistics

Quick start:
    from flashcore import fsrs

    # Schedule a review (algorithm only, no DB calls)
    card = fsrs.schedule(card, fsrs.Rating.GOOD, now)

    # Same, plus a review log to persist
    card, log = fsrs.process_review(card, "good", now)
"""

# Core scheduler API (algorithm logic)
from flashcore.fsrs.scheduler import ReviewLog, infer_level, process_review, schedule

# Constants and parameters
from flashcore.fsrs.constants import D_MAX, D_MIN, EASE_MIN, S_MIN, Level, Rating
from flashcore.fsrs.params import DEFAULT_PARAMS, DEFAULT_W, FSRSParameters, build_params

# Memory state (for advanced usage)
from flashcore.fsrs.memory_state import (
    calculate_retrievability,
    elapsed_days_since,
    interval_for_retention,
)


__all__ = [
    # Core algorithm
    "schedule",
    "process_review",
    "infer_level",
    "ReviewLog",

    # Enums
    "Rating",
    "Level",

    # Parameters
    "FSRSParameters",
    "DEFAULT_PARAMS",
    "DEFAULT_W",
    "build_params",
    "D_MIN",
    "D_MAX",
    "S_MIN",
    "EASE_MIN",

    # Memory state
    "calculate_retrievability",
    "elapsed_days_since",
    "interval_for_retention",
]
