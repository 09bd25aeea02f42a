"""
Shared fixtures for the review scheduler tests.
"""

import random
from datetime import datetime, timezone

import pytest

from core import srs
from core.srs.database import get_session
from core.srs.models import Word


@pytest.fixture
def now():
    return datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    """Fresh SQLite database for one test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'reviews.db'}")
    monkeypatch.setenv("TEST_MODE", "false")
    srs.dispose_engine()
    srs.init_db()
    yield
    srs.dispose_engine()


@pytest.fixture
def seeded_words(sqlite_db):
    """
    Insert a small vocabulary and return the word ids in insertion order.
    """
    entries = [
        ("ephemeral", "Lasting a very short time", 2, 1),
        ("ubiquitous", "Present everywhere", 1, 2),
        ("laconic", "Using very few words", 1, 1),
        ("sanguine", "Optimistic in a difficult situation", 3, 1),
    ]
    session = get_session()
    try:
        words = [
            Word(word=word, definition=definition, day=day, order=order, part_of_speech="adjective")
            for word, definition, day, order in entries
        ]
        session.add_all(words)
        session.commit()
        return [word.id for word in words]
    finally:
        session.close()
