"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from core.analytics.constants import PROGRESS_COLUMNS
from core.srs.progress import WordProgress, calculate_average_quality


def progress_to_df(progress_items: Iterable[WordProgress]) -> pd.DataFrame:
    """
    Flatten word progress records into a dataframe (one row per word).
    """
    rows = [
        {
            "word_id": p.word_id,
            "word": (p.word or {}).get("word"),
            "repetition_level": p.repetition_level,
            "ef_factor": p.easiness_factor,
            "correct_streak": p.correct_streak,
            "review_count": len(p.review_history),
            "average_quality": calculate_average_quality(p.review_history),
            "next_review_date": p.next_review_date,
            "last_practiced": p.last_practiced,
        }
        for p in progress_items
    ]
    if not rows:
        return pd.DataFrame(columns=PROGRESS_COLUMNS)

    df = pd.DataFrame(rows, columns=PROGRESS_COLUMNS)
    df["next_review_date"] = pd.to_datetime(df["next_review_date"], utc=True, errors="coerce")
    df["last_practiced"] = pd.to_datetime(df["last_practiced"], utc=True, errors="coerce")
    return df
