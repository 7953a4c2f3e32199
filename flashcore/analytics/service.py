"""
Service layer to assemble the progress dashboard.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import pandas as pd

from flashcore.analytics.constants import (
    DAILY_GOAL,
    RETENTION_CALCULATION_DAYS,
    STREAK_THRESHOLD,
    WEEKLY_GOAL,
)
from flashcore.analytics.metrics import (
    add_local_day,
    build_day_index,
    compute_current_streak,
    compute_goal_progress,
    compute_retention_rate,
    compute_reviewed_on,
    compute_reviews_by_category,
    compute_reviews_per_day,
    compute_reviews_since,
    local_day,
)
from flashcore.analytics.queries import load_review_logs_df
from flashcore.analytics.types import ProgressDashboardData
from flashcore.fsrs.memory_state import ensure_datetime


def build_dashboard_from_df(
    events_df: pd.DataFrame,
    now: datetime,
    daily_goal: int = DAILY_GOAL,
    weekly_goal: int = WEEKLY_GOAL
) -> ProgressDashboardData:
    """
    Compute every KPI and series from a review-log dataframe.
    """
    now = ensure_datetime(now, "now")
    today = local_day(now)
    events_df = add_local_day(events_df, now.tzinfo)

    day_index = build_day_index(events_df, today)
    reviews_per_day = compute_reviews_per_day(events_df, day_index)
    reviewed_today = compute_reviewed_on(events_df, today)
    streak = compute_current_streak(reviews_per_day)

    return ProgressDashboardData(
        reviewed_today=reviewed_today,
        daily_goal=daily_goal,
        daily_goal_progress=compute_goal_progress(reviewed_today, daily_goal),
        weekly_reviews=compute_reviews_since(events_df, today - pd.Timedelta(days=6)),
        weekly_goal=weekly_goal,
        current_streak=streak,
        streak_milestone_reached=streak >= STREAK_THRESHOLD,
        retention_rate=compute_retention_rate(
            events_df, today - pd.Timedelta(days=RETENTION_CALCULATION_DAYS - 1)
        ),
        reviews_per_day=reviews_per_day,
        reviews_by_category=compute_reviews_by_category(events_df),
    )


def build_progress_dashboard(
    user_id: str,
    now: Optional[datetime] = None,
    daily_goal: int = DAILY_GOAL,
    history_days: Optional[int] = None
) -> ProgressDashboardData:
    """
    Build the progress dashboard for a user.

    Args:
        user_id: Owner of the review history
        now: Reference timestamp (defaults to the current local time)
        daily_goal: Cards per day counted as a met goal
        history_days: Only load this many days of history (all when None)
    """
    if now is None:
        now = datetime.now(timezone.utc).astimezone()
    now = ensure_datetime(now, "now")

    since = now - timedelta(days=history_days) if history_days else None
    events_df = load_review_logs_df(user_id, since=since)
    return build_dashboard_from_df(events_df, now, daily_goal=daily_goal)
