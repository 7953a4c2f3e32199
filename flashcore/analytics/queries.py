"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import pandas as pd

from flashcore.analytics.constants import REVIEW_LOG_COLUMNS
from flashcore.repos import review_log_repo


def review_logs_to_df(rows: list[dict]) -> pd.DataFrame:
    """
    Convert review log documents into a dataframe sorted by review time.

    Rows without a card id or a parseable timestamp are dropped.
    """
    if not rows:
        return pd.DataFrame(columns=REVIEW_LOG_COLUMNS)

    df = pd.DataFrame(rows).rename(columns={
        "cardId": "card_id",
        "reviewedAt": "reviewed_at",
        "subCategory": "sub_category",
    })
    for column in REVIEW_LOG_COLUMNS:
        if column not in df.columns:
            df[column] = None

    df = df[REVIEW_LOG_COLUMNS].copy()
    df["reviewed_at"] = pd.to_datetime(df["reviewed_at"], utc=True, errors="coerce")
    df = df.dropna(subset=["card_id", "reviewed_at"])
    df = df.sort_values("reviewed_at").reset_index(drop=True)
    return df


def load_review_logs_df(user_id: str, since: Optional[datetime] = None) -> pd.DataFrame:
    """
    Load review logs for a user into a dataframe.
    """
    rows = review_log_repo.get_review_logs(user_id, since=since)
    return review_logs_to_df(rows)
