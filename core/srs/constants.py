"""
SRS Constants and Parameters

All configurable parameters for the SM-2 scheduler in one place.
"""

from enum import IntEnum


# ---- Quality Ratings ----

class Quality(IntEnum):
    """Learner self-rating of recall for one review."""
    BLACKOUT = 0    # Didn't recognize the word at all
    INCORRECT = 1   # Wrong, but recognized the word
    HARD = 2        # Wrong, but familiar once the answer was shown
    MEDIUM = 3      # Correct with effort
    GOOD = 4        # Correct after some hesitation
    PERFECT = 5     # Recalled easily


QUALITY_LABELS = {
    Quality.BLACKOUT: "Didn't know",
    Quality.INCORRECT: "Incorrect",
    Quality.HARD: "Hard",
    Quality.MEDIUM: "Medium",
    Quality.GOOD: "Good",
    Quality.PERFECT: "Perfect",
}

QUALITY_DESCRIPTIONS = {
    Quality.BLACKOUT: "Complete blackout, didn't recognize the word at all",
    Quality.INCORRECT: "Incorrect response but recognized the word",
    Quality.HARD: "Incorrect response but after seeing the answer, it felt familiar",
    Quality.MEDIUM: "Correct response but required effort to recall",
    Quality.GOOD: "Correct response with some hesitation",
    Quality.PERFECT: "Perfect response, recalled the word easily",
}

MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3  # quality >= 3 continues the streak


class InvalidRating(ValueError):
    """Quality rating outside 0..5."""


def validate_quality(quality) -> int:
    """
    Return quality as a plain int, or raise InvalidRating.

    Out-of-range values are rejected, never clamped.
    """
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidRating(f"Quality must be an integer 0-5, got {quality!r}")
    if quality < MIN_QUALITY or quality > MAX_QUALITY:
        raise InvalidRating(f"Quality must be between 0 and 5, got {quality}")
    return int(quality)


# ---- Easiness Factor (hundredths) ----

DEFAULT_EF = 250  # 2.50
MIN_EF = 130      # 1.30


# ---- Intervals (days) ----

FIRST_INTERVAL = 1
SECOND_INTERVAL = 3
FAILURE_INTERVAL = 1
MAX_INTERVAL = 365


# ---- Estimators ----

RETENTION_DECAY_DAYS = 5.0  # S in R = R0 * exp(-t/S)
MASTERY_PER_LEVEL = 20
MASTERY_LEVEL_CAP = 90
MASTERY_QUALITY_PIVOT = 2.5
MASTERY_QUALITY_WEIGHT = 5
MASTERED_LEVEL = 5  # repetition level counted as "mastered" in overviews


# ---- Session Sizing ----

DEFAULT_BATCH_CAP = 10
DEFAULT_STUDY_CAPACITY = 20
