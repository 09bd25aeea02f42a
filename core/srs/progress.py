"""
Progress - Word Progress State and Estimators

Defines the schedulable unit (WordProgress), the persisted review history
entry, and the pure helpers built on top of them.

Key concepts:
- Repetition level: consecutive successful reviews since the last failure
- Easiness factor (EF): interval growth multiplier, stored in hundredths
- Retention: display-only forgetting-curve estimate, never used for scheduling
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, TypeVar

from core.srs.constants import (
    DEFAULT_EF,
    MASTERED_LEVEL,
    MASTERY_LEVEL_CAP,
    MASTERY_PER_LEVEL,
    MASTERY_QUALITY_PIVOT,
    MASTERY_QUALITY_WEIGHT,
    RETENTION_DECAY_DAYS,
)


T = TypeVar("T")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return int(math.floor(value + 0.5))


def as_utc(value: datetime | str | None) -> Optional[datetime]:
    """
    Normalize a timestamp to an aware UTC datetime.

    Accepts ISO-8601 strings. Naive datetimes are assumed to be UTC
    (SQLite drops tzinfo on the way back out).
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class ReviewHistoryItem:
    """
    One rating given to a word. Persisted as {date, quality, interval, efFactor}.
    """
    date: datetime
    quality: int
    interval: int
    ef_factor: int

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "quality": self.quality,
            "interval": self.interval,
            "efFactor": self.ef_factor,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "ReviewHistoryItem":
        return cls(
            date=as_utc(data["date"]),
            quality=int(data["quality"]),
            interval=int(data["interval"]),
            ef_factor=int(data["efFactor"]),
        )


@dataclass(frozen=True)
class WordProgress:
    """
    Scheduling state for a single word.

    `word` carries display fields (word, definition, example, ...) and is
    opaque to the scheduler.
    """
    word_id: int
    repetition_level: int = 0
    easiness_factor: int = DEFAULT_EF
    previous_interval: int = 0
    next_review_date: Optional[datetime] = None
    review_history: tuple[ReviewHistoryItem, ...] = ()
    correct_streak: int = 0
    last_practiced: Optional[datetime] = None
    word: dict = field(default_factory=dict, compare=False)

    @property
    def is_new(self) -> bool:
        return not self.review_history

    @property
    def is_mastered(self) -> bool:
        return self.repetition_level >= MASTERED_LEVEL

    def is_due(self, now: datetime) -> bool:
        return self.next_review_date is None or as_utc(self.next_review_date) <= as_utc(now)


def create_review_history_item(
    quality: int,
    interval: int,
    ef_factor: int,
    now: Optional[datetime] = None
) -> ReviewHistoryItem:
    """
    Stamp a review history entry (defaults to the current time).
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return ReviewHistoryItem(
        date=as_utc(now),
        quality=int(quality),
        interval=int(interval),
        ef_factor=int(ef_factor),
    )


def _next_review_date_of(item) -> datetime | str | None:
    if isinstance(item, Mapping):
        return item.get("next_review_date")
    return getattr(item, "next_review_date", None)


def select_due_items(items_with_progress: Iterable[T], now: datetime) -> list[T]:
    """
    Keep items whose next review date is unset or not after `now`.

    Order-preserving; inputs are not modified.
    """
    now = as_utc(now)
    due = []
    for item in items_with_progress:
        review_date = _next_review_date_of(item)
        if not review_date or as_utc(review_date) <= now:
            due.append(item)
    return due


def estimate_retention(days_since_review: float, initial_retention: float = 100) -> int:
    """
    Estimate retention percentage with the Ebbinghaus curve R = R0 * exp(-t/S).

    Display only. Result is clamped to [0, 100].
    """
    retention = initial_retention * math.exp(-days_since_review / RETENTION_DECAY_DAYS)
    return max(0, min(100, round_half_up(retention)))


def calculate_average_quality(history: Iterable[ReviewHistoryItem]) -> float:
    """Mean quality over the history; 0 for an empty history."""
    qualities = [item.quality for item in history]
    if not qualities:
        return 0.0
    return sum(qualities) / len(qualities)


def calculate_mastery_level(repetition_level: int, average_quality: float) -> int:
    """
    Mastery percentage from streak length and answer quality.

    Each repetition level is worth 20% (capped at 90%); average quality above
    2.5 adds up to 12.5%.
    """
    base = min(repetition_level * MASTERY_PER_LEVEL, MASTERY_LEVEL_CAP)
    quality_adj = max(0.0, (average_quality - MASTERY_QUALITY_PIVOT) * MASTERY_QUALITY_WEIGHT)
    return round_half_up(min(100, base + quality_adj))


def _due_sort_key(progress: WordProgress) -> tuple:
    word = progress.word or {}
    return (
        0 if progress.is_new else 1,
        progress.repetition_level,
        word.get("day") or 0,
        word.get("order") or 0,
    )


def order_due_candidates(items: Iterable[WordProgress]) -> list[WordProgress]:
    """
    Order due items: new words first, then lower repetition level, then day, then order.
    """
    return sorted(items, key=_due_sort_key)
