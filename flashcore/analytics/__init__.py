"""
Analytics package exports.
"""

from flashcore.analytics.constants import DAILY_GOAL, RETENTION_CALCULATION_DAYS, STREAK_THRESHOLD
from flashcore.analytics.service import build_dashboard_from_df, build_progress_dashboard
from flashcore.analytics.types import ProgressDashboardData

__all__ = [
    "DAILY_GOAL",
    "RETENTION_CALCULATION_DAYS",
    "STREAK_THRESHOLD",
    "build_dashboard_from_df",
    "build_progress_dashboard",
    "ProgressDashboardData",
]
