"""
SRS - SM-2 Spaced Repetition Scheduler

Main API for the vocabulary review system.

This module implements a SuperMemo SM-2 style scheduler with:
- Easiness factor updates in hundredths (floor 1.30)
- Streak reset on failed recall, fixed 1/3-day first intervals
- Strictly growing intervals afterwards (capped at one year)
- Display-only retention and mastery estimates

Quick start:
    from core import srs

    # Initialize database
    srs.init_db()

    # Process a review (algorithm only, no DB calls)
    progress, history_item = srs.apply_review(progress, quality, now)

    # Get due words
    due = srs.fetch_due_word_progress(user_id)
"""

# Core scheduler API (algorithm logic)
from core.srs.scheduler import (
    ScheduleUpdate,
    apply_review,
    compute_next_schedule,
    get_optimal_study_limit,
    update_easiness_factor,
)

# Progress state and estimators
from core.srs.progress import (
    ReviewHistoryItem,
    WordProgress,
    calculate_average_quality,
    calculate_mastery_level,
    create_review_history_item,
    estimate_retention,
    order_due_candidates,
    select_due_items,
)

# Database API
from core.srs.database import (
    WordProgressRepository,
    count_words,
    dispose_engine,
    fetch_due_word_progress,
    get_batch_cap,
    get_study_capacity,
    get_default_user_id,
    get_word_progress_by_user,
    init_db,
    is_test_mode,
    load_word_progress,
    reset_db,
    submit_review,
)

# Constants and parameters
from core.srs.constants import (
    DEFAULT_BATCH_CAP,
    DEFAULT_EF,
    DEFAULT_STUDY_CAPACITY,
    MASTERED_LEVEL,
    MAX_INTERVAL,
    MIN_EF,
    QUALITY_DESCRIPTIONS,
    QUALITY_LABELS,
    InvalidRating,
    Quality,
)


__all__ = [
    # Core algorithm
    "ScheduleUpdate",
    "apply_review",
    "compute_next_schedule",
    "get_optimal_study_limit",
    "update_easiness_factor",

    # Progress state
    "ReviewHistoryItem",
    "WordProgress",
    "calculate_average_quality",
    "calculate_mastery_level",
    "create_review_history_item",
    "estimate_retention",
    "order_due_candidates",
    "select_due_items",

    # Database operations
    "WordProgressRepository",
    "count_words",
    "dispose_engine",
    "fetch_due_word_progress",
    "get_batch_cap",
    "get_study_capacity",
    "get_default_user_id",
    "get_word_progress_by_user",
    "init_db",
    "is_test_mode",
    "load_word_progress",
    "reset_db",
    "submit_review",

    # Enums and errors
    "Quality",
    "InvalidRating",

    # Parameters
    "DEFAULT_BATCH_CAP",
    "DEFAULT_EF",
    "DEFAULT_STUDY_CAPACITY",
    "MASTERED_LEVEL",
    "MAX_INTERVAL",
    "MIN_EF",
    "QUALITY_DESCRIPTIONS",
    "QUALITY_LABELS",
]
