"""
Scheduler - SM-2 Algorithm Logic

Pure SM-2 scheduling and state updates (no database calls, no wall clock).

Main workflow:
1. Load word progress (caller's responsibility)
2. Update the easiness factor from the quality rating
3. Reset or advance the repetition streak
4. Derive the next interval and review date
5. Return the updated progress + history entry

This module handles ONLY the algorithm logic.
Database I/O is handled by the database module.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Tuple

from core.srs.constants import (
    FAILURE_INTERVAL,
    FIRST_INTERVAL,
    MAX_INTERVAL,
    MIN_EF,
    PASSING_QUALITY,
    SECOND_INTERVAL,
    validate_quality,
)
from core.srs.progress import (
    ReviewHistoryItem,
    WordProgress,
    as_utc,
    create_review_history_item,
    round_half_up,
)


@dataclass(frozen=True)
class ScheduleUpdate:
    """Result of one scheduling step."""
    next_repetition_level: int
    next_easiness_factor: int
    next_interval: int
    next_review_date: datetime


def update_easiness_factor(quality: int, easiness_factor: int) -> int:
    """
    SM-2 easiness update in hundredths, floored at 130.

    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
    """
    miss = 5 - quality
    delta = 0.1 - miss * (0.08 + miss * 0.02)
    return max(MIN_EF, round_half_up(easiness_factor + delta * 100))


def compute_next_schedule(
    quality: int,
    repetition_level: int,
    easiness_factor: int,
    previous_interval: int,
    now: datetime
) -> ScheduleUpdate:
    """
    Compute the next SM-2 schedule for one review.

    Args:
        quality: Rating 0-5 (raises InvalidRating otherwise)
        repetition_level: Consecutive successful reviews so far
        easiness_factor: Current EF in hundredths (>= 130)
        previous_interval: Previous interval in days (0 before any review)
        now: Review time; the next review date is measured from here

    Returns:
        ScheduleUpdate with the new level, EF, interval and review date
    """
    quality = validate_quality(quality)
    next_ef = update_easiness_factor(quality, easiness_factor)

    if quality < PASSING_QUALITY:
        next_level = 0
        next_interval = FAILURE_INTERVAL
    else:
        next_level = repetition_level + 1
        if next_level == 1:
            next_interval = FIRST_INTERVAL
        elif next_level == 2:
            next_interval = SECOND_INTERVAL
        else:
            next_interval = min(round_half_up(previous_interval * next_ef / 100), MAX_INTERVAL)
            # Intervals must keep growing in the growth phase
            if next_interval <= previous_interval:
                next_interval = previous_interval + 1

    return ScheduleUpdate(
        next_repetition_level=next_level,
        next_easiness_factor=next_ef,
        next_interval=next_interval,
        next_review_date=as_utc(now) + timedelta(days=next_interval),
    )


def apply_review(
    progress: WordProgress,
    quality: int,
    now: datetime
) -> Tuple[WordProgress, ReviewHistoryItem]:
    """
    Apply one rating to a word's progress.

    Returns a new WordProgress (the input is left untouched) together with
    the history entry that was appended to it.
    """
    update = compute_next_schedule(
        quality,
        progress.repetition_level,
        progress.easiness_factor,
        progress.previous_interval,
        now,
    )
    history_item = create_review_history_item(
        quality,
        update.next_interval,
        update.next_easiness_factor,
        now=now,
    )
    passed = quality >= PASSING_QUALITY
    updated = replace(
        progress,
        repetition_level=update.next_repetition_level,
        easiness_factor=update.next_easiness_factor,
        previous_interval=update.next_interval,
        next_review_date=update.next_review_date,
        review_history=progress.review_history + (history_item,),
        correct_streak=progress.correct_streak + 1 if passed else 0,
        last_practiced=history_item.date,
    )
    return updated, history_item


def get_optimal_study_limit(user_capacity: int, total_due_items: int) -> int:
    """Number of items to study: all due items, up to the user's capacity."""
    return min(user_capacity, total_due_items)
