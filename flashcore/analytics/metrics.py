"""
Metric computations for progress analytics.

Days are local calendar days in the timezone of the reference timestamp,
represented as naive midnight timestamps.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

import pandas as pd

from flashcore.analytics.constants import RECALLED_RATINGS
from flashcore.cards import normalize_label


def local_day(now: datetime) -> pd.Timestamp:
    """
    Local calendar day of now as a naive midnight timestamp.
    """
    return pd.Timestamp(now).tz_convert(now.tzinfo).tz_localize(None).normalize()


def add_local_day(events_df: pd.DataFrame, tz: tzinfo) -> pd.DataFrame:
    """
    Return a copy of the review dataframe with a ``day`` column in tz.
    """
    df = events_df.copy()
    if df.empty:
        df["day"] = pd.Series(dtype="datetime64[ns]")
        return df
    df["day"] = df["reviewed_at"].dt.tz_convert(tz).dt.tz_localize(None).dt.normalize()
    return df


def build_day_index(events_df: pd.DataFrame, today: pd.Timestamp) -> pd.DatetimeIndex:
    """
    Dense day index from the first review day through today.
    """
    if events_df.empty:
        return pd.DatetimeIndex([today])
    start = min(events_df["day"].min(), today)
    return pd.date_range(start=start, end=today, freq="D")


def compute_reviews_per_day(events_df: pd.DataFrame, day_index: pd.DatetimeIndex) -> pd.Series:
    """
    Number of reviews on each day of the index (0 on days without reviews).
    """
    if len(day_index) == 0:
        return pd.Series(dtype="int64")
    if events_df.empty:
        return pd.Series(0, index=day_index, dtype="int64")
    daily = events_df.groupby("day").size()
    return daily.reindex(day_index, fill_value=0).astype("int64")


def compute_reviewed_on(events_df: pd.DataFrame, day: pd.Timestamp) -> int:
    """
    Number of reviews logged on one local day.
    """
    if events_df.empty:
        return 0
    return int((events_df["day"] == day).sum())


def compute_reviews_since(events_df: pd.DataFrame, start_day: pd.Timestamp) -> int:
    """Number of reviews on or after start_day."""
    if events_df.empty:
        return 0
    return int((events_df["day"] >= start_day).sum())


def compute_current_streak(reviews_per_day: pd.Series) -> int:
    """
    Consecutive days with at least one review, ending at the last day.

    A day without reviews yet at the end of the series does not break the
    streak; it only stops counting there.
    """
    counts = list(reviews_per_day)
    if counts and counts[-1] == 0:
        counts = counts[:-1]

    streak = 0
    for count in reversed(counts):
        if count <= 0:
            break
        streak += 1
    return streak


def compute_goal_progress(done: int, goal: int) -> float:
    """
    Fraction of a goal reached, capped at 1.0.
    """
    if goal <= 0:
        return 1.0
    return min(1.0, max(0, done) / goal)


def compute_retention_rate(events_df: pd.DataFrame, start_day: pd.Timestamp) -> Optional[float]:
    """
    Share of reviews since start_day that were recalled (rated hard or better).

    Returns:
        Rate between 0 and 1, or None when there are no reviews in the window
    """
    if events_df.empty:
        return None
    window = events_df[events_df["day"] >= start_day]
    if window.empty:
        return None
    return float(window["rating"].isin(RECALLED_RATINGS).mean())


def compute_reviews_by_category(events_df: pd.DataFrame) -> pd.Series:
    """
    Review counts per category, largest first.
    """
    if events_df.empty:
        return pd.Series(dtype="int64")
    categories = events_df["category"].map(
        lambda label: normalize_label(None if pd.isna(label) else label)
    )
    return categories.value_counts().astype("int64")
