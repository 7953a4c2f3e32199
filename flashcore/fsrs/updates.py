"""
FSRS State Updates

Difficulty, stability, interval and ease-factor rules applied on a review.

Key principles:
- Failure resets stability; the card is treated as newly learning
- Spaced success produces the largest stability gains, with diminishing
  returns as the gap grows
- Interval ordering easy >= good >= hard holds by construction
"""

from __future__ import annotations

import math

from flashcore.fsrs.constants import D_MAX, D_MIN, EASE_DELTA, EASE_MIN, Rating, S_MIN
from flashcore.fsrs.memory_state import calculate_retrievability, interval_for_retention
from flashcore.fsrs.params import FSRSParameters


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def update_difficulty(
    difficulty: float,
    rating: Rating,
    params: FSRSParameters
) -> float:
    """
    Update difficulty based on the review outcome.

    Deltas:
        AGAIN: +2 * again_factor * w[6]
        HARD:  +0.5 * w[5]
        GOOD:  -0.3 * w[6]
        EASY:  -(w[6] + w[7])

    Returns:
        New difficulty value (clipped to [1, 10])
    """
    w = params.w
    if rating == Rating.AGAIN:
        delta = 2.0 * params.again_factor * w[6]
    elif rating == Rating.HARD:
        delta = 0.5 * w[5]
    elif rating == Rating.GOOD:
        delta = -0.3 * w[6]
    else:
        delta = -(w[6] + w[7])

    return clamp(difficulty + delta, D_MIN, D_MAX)


def retrievability_adjustment(
    stability: float,
    difficulty: float,
    elapsed_days: float,
    params: FSRSParameters
) -> float:
    """
    Stability growth multiplier for a successful review.

    Formula:
        1 + e^w8 * (11 - D) * S^-w9 * (e^(w10 * (1 - R)) - 1)

    Where R is retrievability after elapsed_days. A review right after the
    previous one (R = 1) gives a multiplier of 1; growth rises with the gap
    and flattens as R approaches 0. A product too large for a float is
    returned as inf; ``update_stability`` clamps it to maximum_interval.
    """
    w = params.w
    retrievability = calculate_retrievability(stability, elapsed_days)
    try:
        recall_gain = math.exp(w[10] * (1.0 - retrievability)) - 1.0
        if recall_gain == 0.0:
            return 1.0
        return 1.0 + (
            math.exp(w[8])
            * (11.0 - difficulty)
            * math.pow(max(S_MIN, stability), -w[9])
            * recall_gain
        )
    except OverflowError:
        return math.inf


def rating_factor(rating: Rating, params: FSRSParameters) -> float:
    if rating == Rating.HARD:
        return params.hard_factor
    if rating == Rating.EASY:
        return params.easy_factor
    return params.good_factor


def update_stability(
    stability: float,
    new_difficulty: float,
    elapsed_days: float,
    rating: Rating,
    params: FSRSParameters
) -> float:
    """
    Update stability after a review.

    AGAIN resets to initial_stability. Other ratings:
        S_new = S * factor(rating) * retrievability_adjustment

    Returns:
        New stability, clamped to [S_MIN, maximum_interval]
    """
    if rating == Rating.AGAIN:
        new_stability = params.initial_stability
    else:
        adjustment = retrievability_adjustment(stability, new_difficulty, elapsed_days, params)
        new_stability = stability * rating_factor(rating, params) * adjustment

    return clamp(new_stability, S_MIN, float(params.maximum_interval))


def candidate_intervals(
    stability: float,
    difficulty: float,
    elapsed_days: float,
    is_new_card: bool,
    params: FSRSParameters
) -> dict[Rating, float]:
    """
    Unrounded intervals (days) for the three passing ratings.

    New cards start from the configured initial intervals. Reviewed cards
    derive the good interval from the stability that a GOOD answer would
    produce, targeting request_retention; hard is scaled from the hard
    stability and capped at good; easy gets the easy_factor bonus and is
    never shorter than good.
    """
    if is_new_card:
        hard = float(params.initial_hard_interval)
        good = float(params.initial_good_interval)
        easy = float(params.initial_easy_interval)
    else:
        projected = {}
        for rating in (Rating.HARD, Rating.GOOD, Rating.EASY):
            d_new = update_difficulty(difficulty, rating, params)
            s_new = update_stability(stability, d_new, elapsed_days, rating, params)
            projected[rating] = interval_for_retention(s_new, params.request_retention)

        good = projected[Rating.GOOD]
        hard = max(float(params.initial_hard_interval), projected[Rating.HARD])
        easy = projected[Rating.EASY] * params.easy_factor

    hard = min(hard, good)
    easy = max(easy, good)
    return {Rating.HARD: hard, Rating.GOOD: good, Rating.EASY: easy}


def fuzz_interval(days: float, fuzz: float, params: FSRSParameters) -> int:
    """
    Apply the shared fuzz multiplier, round and clamp.

    Args:
        days: Unrounded interval
        fuzz: Jitter in [-1, 1); scaled by fuzz_factor
        params: Parameter set

    Returns:
        Interval in [1, maximum_interval]
    """
    fuzzed = days * (1.0 + fuzz * params.fuzz_factor)
    if math.isnan(fuzzed) or math.isinf(fuzzed):
        fuzzed = float(params.maximum_interval)
    return int(clamp(round(fuzzed), 1, params.maximum_interval))


def update_ease_factor(ease_factor: float, rating: Rating) -> float:
    """
    Legacy ease factor for display; not used by the interval math.
    """
    return max(EASE_MIN, ease_factor + EASE_DELTA[rating])
