"""
FSRS Constants

Ratings, display levels and the fixed bounds every scheduler output is
clamped to. Tunable weights live in ``FSRSParameters`` instead.
"""

from __future__ import annotations

from flashcore.ratings import Level, Rating


# ---- Bounds ----

D_MIN = 1.0       # Minimum difficulty
D_MAX = 10.0      # Maximum difficulty
S_MIN = 0.1       # Minimum stability (days)
EASE_MIN = 1.3    # Ease factor floor


# ---- Forgetting curve ----
# R(t) = (1 + FACTOR * t / S) ** DECAY, so R(S) == 0.9

DECAY = -0.5
FACTOR = 19.0 / 81.0


# ---- Ease factor adjustments by rating (display only) ----

EASE_DELTA = {
    Rating.AGAIN: -0.20,
    Rating.HARD: -0.15,
    Rating.GOOD: 0.0,
    Rating.EASY: +0.15,
}


# ---- Level inference thresholds ----

LEVEL_AGAIN_DIFFICULTY = 8.0
LEVEL_HARD_DIFFICULTY = 7.0
LEVEL_EASY_DIFFICULTY = 3.0
LEVEL_EASY_EASE = 2.8
LEVEL_GOOD_INTERVAL = 4
