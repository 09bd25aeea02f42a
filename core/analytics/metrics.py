"""
Metric computations for review analytics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import pandas as pd

from core.analytics.constants import DEFAULT_AVERAGE_EF
from core.srs.constants import MASTERED_LEVEL
from core.srs.progress import calculate_mastery_level, estimate_retention


def compute_mastered_count(progress_df: pd.DataFrame) -> int:
    """
    Words whose repetition level reached MASTERED_LEVEL.
    """
    if progress_df.empty:
        return 0
    return int((progress_df["repetition_level"] >= MASTERED_LEVEL).sum())


def compute_learning_count(progress_df: pd.DataFrame) -> int:
    """
    Words started but not yet mastered.
    """
    if progress_df.empty:
        return 0
    levels = progress_df["repetition_level"]
    return int(((levels > 0) & (levels < MASTERED_LEVEL)).sum())


def compute_due_count(progress_df: pd.DataFrame, total_words: int, now: datetime) -> int:
    """
    Due words: stored rows with no or past review date, plus never-reviewed words.
    """
    unseen = max(0, total_words - len(progress_df))
    if progress_df.empty:
        return unseen
    dates = progress_df["next_review_date"]
    due_rows = dates.isna() | (dates <= pd.Timestamp(now))
    return int(due_rows.sum()) + unseen


def compute_average_easiness_factor(progress_df: pd.DataFrame) -> float:
    """
    Mean EF as a real number (hundredths / 100).
    """
    if progress_df.empty:
        return DEFAULT_AVERAGE_EF
    return float(progress_df["ef_factor"].mean()) / 100


def compute_current_streak(progress_df: pd.DataFrame) -> int:
    if progress_df.empty:
        return 0
    return int(progress_df["correct_streak"].max())


def compute_total_reviews(progress_df: pd.DataFrame) -> int:
    if progress_df.empty:
        return 0
    return int(progress_df["review_count"].sum())


def compute_next_review_date(progress_df: pd.DataFrame, now: datetime) -> Optional[datetime]:
    """
    Earliest review date still in the future, or None.
    """
    if progress_df.empty:
        return None
    upcoming = progress_df["next_review_date"].dropna()
    upcoming = upcoming[upcoming > pd.Timestamp(now)]
    if upcoming.empty:
        return None
    return upcoming.min().to_pydatetime()


def compute_mastery(progress_df: pd.DataFrame) -> pd.Series:
    """
    Per-word mastery percentage.
    """
    if progress_df.empty:
        return pd.Series(dtype="int64")
    return progress_df.apply(
        lambda row: calculate_mastery_level(int(row["repetition_level"]), float(row["average_quality"])),
        axis=1,
    ).astype("int64")


def compute_retention(progress_df: pd.DataFrame, now: datetime) -> pd.Series:
    """
    Per-word retention estimate from days since last practice (display only).

    Words never practiced report 0.
    """
    if progress_df.empty:
        return pd.Series(dtype="int64")
    elapsed_days = (pd.Timestamp(now) - progress_df["last_practiced"]).dt.total_seconds() / 86400.0
    return elapsed_days.apply(
        lambda days: 0 if pd.isna(days) else estimate_retention(max(0.0, days))
    ).astype("int64")
