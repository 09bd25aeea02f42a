"""
Tests for the SQLAlchemy persistence layer (SQLite in a temp dir).
"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from core import srs
from core.review_session import ReviewSessionController
from core.srs.database import get_batch_cap, get_database_url, get_study_capacity


# ---- Configuration ----

def test_database_url_is_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(ValueError):
        get_database_url()


def test_test_mode_switches_database(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://user:pw@localhost:5432/learning_db")
    monkeypatch.setenv("TEST_MODE", "true")

    assert get_database_url().endswith("/test_learning_db")
    assert srs.is_test_mode()


def test_session_limits_from_environment(monkeypatch):
    monkeypatch.setenv("REVIEW_BATCH_CAP", "5")
    monkeypatch.setenv("DAILY_STUDY_CAPACITY", "not-a-number")

    assert get_batch_cap() == 5
    assert get_study_capacity() == srs.DEFAULT_STUDY_CAPACITY


# ---- Due words ----

def test_unreviewed_words_are_due_in_curriculum_order(seeded_words, now):
    due = srs.fetch_due_word_progress("alice", now=now)

    assert [item.word["word"] for item in due] == ["laconic", "ubiquitous", "ephemeral", "sanguine"]
    assert all(item.is_new for item in due)
    assert all(item.easiness_factor == srs.DEFAULT_EF for item in due)


def test_due_words_respect_limit(seeded_words, now):
    assert len(srs.fetch_due_word_progress("alice", limit=2, now=now)) == 2


def test_submit_review_round_trip(seeded_words, now):
    word_id = seeded_words[0]
    updated, history_item = srs.apply_review(srs.WordProgress(word_id=word_id), 5, now)

    srs.submit_review("alice", updated, 5, history_item)
    stored = srs.load_word_progress("alice", word_id)

    assert stored == updated
    assert stored.review_history[0].to_dict() == history_item.to_dict()
    assert stored.next_review_date == now + timedelta(days=1)
    assert stored.word["word"] == "ephemeral"


def test_reviewed_word_leaves_due_list_until_due(seeded_words, now):
    word_id = seeded_words[0]
    updated, history_item = srs.apply_review(srs.WordProgress(word_id=word_id), 5, now)
    srs.submit_review("alice", updated, 5, history_item)

    due_now = srs.fetch_due_word_progress("alice", now=now)
    due_later = srs.fetch_due_word_progress("alice", now=now + timedelta(days=2))

    assert word_id not in [item.word_id for item in due_now]
    assert word_id in [item.word_id for item in due_later]
    # reviewed words come after new ones
    assert due_later[-1].word_id == word_id


def test_progress_is_scoped_per_user(seeded_words, now):
    word_id = seeded_words[0]
    updated, history_item = srs.apply_review(srs.WordProgress(word_id=word_id), 5, now)
    srs.submit_review("alice", updated, 5, history_item)

    assert srs.load_word_progress("bob", word_id) is None
    assert len(srs.fetch_due_word_progress("bob", now=now)) == len(seeded_words)


def test_repeated_reviews_update_single_row(seeded_words, now):
    progress = srs.WordProgress(word_id=seeded_words[1])
    for offset, quality in enumerate([5, 4]):
        progress, history_item = srs.apply_review(progress, quality, now + timedelta(days=offset * 2))
        srs.submit_review("alice", progress, quality, history_item)

    rows = srs.get_word_progress_by_user("alice")

    assert len(rows) == 1
    assert rows[0].repetition_level == 2
    assert rows[0].previous_interval == 3
    assert [item.quality for item in rows[0].review_history] == [5, 4]


def test_invalid_payload_is_not_written(seeded_words, now):
    word_id = seeded_words[0]
    updated, history_item = srs.apply_review(srs.WordProgress(word_id=word_id), 5, now)
    broken = srs.WordProgress(
        word_id=word_id,
        easiness_factor=100,
        next_review_date=updated.next_review_date,
        review_history=updated.review_history,
    )

    with pytest.raises(ValidationError):
        srs.submit_review("alice", broken, 5, history_item)

    assert srs.load_word_progress("alice", word_id) is None


def test_count_words(seeded_words):
    assert srs.count_words() == len(seeded_words)


def test_controller_with_repository(seeded_words, rng, now):
    repository = srs.WordProgressRepository("alice")
    controller = ReviewSessionController(repository, rng=rng, clock=lambda: now, batch_cap=3)

    controller.start(repository.fetch_due_word_progress(now=now))
    while not controller.state.is_completed:
        controller.flip()
        controller.rate(4)
    controller.shutdown()

    stored = repository.get_word_progress()
    assert len(stored) == 3
    assert all(item.repetition_level == 1 for item in stored)
    assert controller.drain_failures() == []
    assert len(repository.fetch_due_word_progress(now=now)) == 1
