"""
Service layer to assemble review analytics.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Optional

import pandas as pd

from core import srs
from core.analytics.constants import MASTERY_COLUMNS
from core.analytics.metrics import (
    compute_average_easiness_factor,
    compute_current_streak,
    compute_due_count,
    compute_learning_count,
    compute_mastered_count,
    compute_mastery,
    compute_next_review_date,
    compute_retention,
    compute_total_reviews,
)
from core.analytics.queries import progress_to_df
from core.analytics.types import ReviewOverview
from core.srs.progress import WordProgress, as_utc


def build_review_overview(
    progress_items: Iterable[WordProgress],
    total_words: int,
    now: Optional[datetime] = None
) -> ReviewOverview:
    """
    Summarize a learner's stored progress against the whole vocabulary.
    """
    now = as_utc(now) or datetime.now(timezone.utc)
    progress_df = progress_to_df(progress_items)

    mastered = compute_mastered_count(progress_df)
    learning = compute_learning_count(progress_df)

    return ReviewOverview(
        total_words=total_words,
        mastered_count=mastered,
        learning_count=learning,
        new_count=max(0, total_words - mastered - learning),
        due_count=compute_due_count(progress_df, total_words, now),
        average_easiness_factor=compute_average_easiness_factor(progress_df),
        current_streak=compute_current_streak(progress_df),
        total_reviews=compute_total_reviews(progress_df),
        next_review_date=compute_next_review_date(progress_df, now),
    )


def build_mastery_table(
    progress_items: Iterable[WordProgress],
    now: Optional[datetime] = None
) -> pd.DataFrame:
    """
    One row per word with mastery and retention estimates, weakest first.
    """
    now = as_utc(now) or datetime.now(timezone.utc)
    progress_df = progress_to_df(progress_items)
    if progress_df.empty:
        return pd.DataFrame(columns=MASTERY_COLUMNS)

    table = progress_df.copy()
    table["mastery"] = compute_mastery(progress_df)
    table["retention"] = compute_retention(progress_df, now)
    return table[MASTERY_COLUMNS].sort_values(["mastery", "word_id"]).reset_index(drop=True)


def build_user_overview(user_id: str, now: Optional[datetime] = None) -> ReviewOverview:
    """
    Build the overview for a stored user.
    """
    return build_review_overview(srs.get_word_progress_by_user(user_id), srs.count_words(), now)


def build_user_mastery_table(user_id: str, now: Optional[datetime] = None) -> pd.DataFrame:
    return build_mastery_table(srs.get_word_progress_by_user(user_id), now)
