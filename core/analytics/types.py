"""
Types for review analytics.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ReviewOverview:
    """
    Headline numbers for a learner's spaced-repetition progress.
    """
    total_words: int
    mastered_count: int
    learning_count: int
    new_count: int
    due_count: int
    average_easiness_factor: float
    current_streak: int
    total_reviews: int
    next_review_date: Optional[datetime]
