"""
Constants for review analytics.
"""

from __future__ import annotations

from typing import Final


PROGRESS_COLUMNS: Final[list[str]] = [
    "word_id",
    "word",
    "repetition_level",
    "ef_factor",
    "correct_streak",
    "review_count",
    "average_quality",
    "next_review_date",
    "last_practiced",
]

MASTERY_COLUMNS: Final[list[str]] = [
    "word_id",
    "word",
    "repetition_level",
    "average_quality",
    "mastery",
    "retention",
    "next_review_date",
]

DEFAULT_AVERAGE_EF: Final[float] = 2.5
