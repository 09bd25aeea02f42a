"""
Pydantic models for the persisted review shape.

Any storage backend must keep ReviewHistoryItem field-for-field
({date, quality, interval, efFactor}) so history stays replayable.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from core.srs.constants import MAX_QUALITY, MIN_EF, MIN_QUALITY
from core.srs.progress import ReviewHistoryItem, WordProgress


class ReviewHistoryItemSchema(BaseModel):
    """One persisted review history entry."""
    date: datetime
    quality: int = Field(ge=MIN_QUALITY, le=MAX_QUALITY)
    interval: int = Field(ge=0)
    efFactor: int = Field(ge=MIN_EF)


class ReviewSubmission(BaseModel):
    """
    Payload written to storage after a rating.
    """
    word_id: int
    quality: int = Field(ge=MIN_QUALITY, le=MAX_QUALITY)
    repetition_level: int = Field(ge=0)
    ef_factor: int = Field(ge=MIN_EF)
    previous_interval: int = Field(ge=0)
    next_review_date: datetime
    correct_streak: int = Field(ge=0)
    review_history: list[ReviewHistoryItemSchema]
    last_practiced: datetime

    @classmethod
    def from_review(
        cls,
        progress: WordProgress,
        quality: int,
        history_item: ReviewHistoryItem
    ) -> "ReviewSubmission":
        history = list(progress.review_history)
        if not history or history[-1] != history_item:
            history.append(history_item)
        return cls(
            word_id=progress.word_id,
            quality=quality,
            repetition_level=progress.repetition_level,
            ef_factor=progress.easiness_factor,
            previous_interval=progress.previous_interval,
            next_review_date=progress.next_review_date,
            correct_streak=progress.correct_streak,
            review_history=[ReviewHistoryItemSchema(**item.to_dict()) for item in history],
            last_practiced=progress.last_practiced or history_item.date,
        )

    def history_json(self) -> list[dict]:
        """History as JSON-ready dicts (ISO-8601 dates)."""
        return [item.model_dump(mode="json") for item in self.review_history]
