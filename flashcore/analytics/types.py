"""
Types for progress analytics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pandas as pd


@dataclass(frozen=True)
class ProgressDashboardData:
    """
    Precomputed progress metrics and series for one user.
    """
    reviewed_today: int
    daily_goal: int
    daily_goal_progress: float          # 0.0 - 1.0
    weekly_reviews: int
    weekly_goal: int
    current_streak: int                 # consecutive days with reviews
    streak_milestone_reached: bool
    retention_rate: Optional[float]     # None without reviews in the window
    reviews_per_day: pd.Series          # indexed by local calendar day
    reviews_by_category: pd.Series
