"""
Memory State - Retrievability and Elapsed Time

Key concepts:
- Stability (S): days until retrievability falls to 90%
- Difficulty (D): how hard the card is to learn (1-10 scale)
- Retrievability (R): probability of successful recall at time t
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from flashcore.errors import InvalidTimestampError
from flashcore.fsrs.constants import DECAY, FACTOR, S_MIN
from flashcore.logging_config import get_logger

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400.0


def ensure_datetime(value: object, name: str = "timestamp") -> datetime:
    """
    Validate a timestamp at a call boundary.

    Naive datetimes are interpreted as local time and returned aware.

    Raises:
        InvalidTimestampError: if value is not a datetime
    """
    if not isinstance(value, datetime):
        raise InvalidTimestampError(f"{name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        return value.astimezone()
    return value


def finite_or(value: object, default: float) -> float:
    """
    Return value as a finite float, or default when it is missing/NaN/inf.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        logger.warning("Non-finite value %r replaced with %s", value, default)
        return default
    return number


def calculate_retrievability(stability: float, elapsed_days: float) -> float:
    """
    Calculate retrievability on the FSRS power forgetting curve.

    Formula: R = (1 + FACTOR * t / S) ^ DECAY

    Interpretation:
    - Immediately after review: R = 1.0
    - After S days: R = 0.9
    - Decays more slowly than an exponential for long gaps

    Args:
        stability: Current stability in days
        elapsed_days: Days since the last review

    Returns:
        Retrievability between 0 and 1
    """
    if elapsed_days <= 0:
        return 1.0
    stability = max(S_MIN, stability)
    return (1.0 + FACTOR * elapsed_days / stability) ** DECAY


def interval_for_retention(stability: float, request_retention: float) -> float:
    """
    Days until retrievability falls to request_retention.

    Inverse of ``calculate_retrievability``; equals S at 0.9.
    """
    stability = max(S_MIN, stability)
    try:
        return stability / FACTOR * (request_retention ** (1.0 / DECAY) - 1.0)
    except OverflowError:
        return math.inf


def elapsed_days_since(
    reference: Optional[datetime],
    now: datetime
) -> float:
    """
    Days between reference and now, never negative.

    Args:
        reference: Last review (or creation) timestamp, None if unknown
        now: Current timestamp

    Returns:
        Elapsed days (0 if reference is None or in the future)
    """
    if reference is None:
        return 0.0
    reference = ensure_datetime(reference, "reference")
    delta = (now - reference).total_seconds() / SECONDS_PER_DAY
    return max(0.0, delta)
