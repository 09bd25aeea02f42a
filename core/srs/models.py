"""
SQLAlchemy ORM Models for SRS Database

Defines the Word and WordProgress tables used by the review scheduler.
"""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

from core.srs.constants import DEFAULT_EF

Base = declarative_base()


class Word(Base):
    """
    Vocabulary entry. Authored elsewhere; read-only for the scheduler.
    """
    __tablename__ = 'words'

    id = Column(Integer, primary_key=True, autoincrement=True)
    word = Column(String(255), nullable=False)
    definition = Column(Text, nullable=False)
    example = Column(Text, nullable=True)
    pronunciation = Column(String(255), nullable=True)
    part_of_speech = Column(String(50), nullable=True)

    # Grouping used for due-word ordering
    day = Column(Integer, nullable=False, default=1)
    order = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<Word(id={self.id}, {self.word})>"


class WordProgress(Base):
    """
    Per-user SM-2 state for one word.
    """
    __tablename__ = 'word_progress'
    __table_args__ = (UniqueConstraint('user_id', 'word_id', name='uq_word_progress_user_word'),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)
    word_id = Column(Integer, nullable=False)

    # Scheduling state
    repetition_level = Column(Integer, nullable=False, default=0)
    ef_factor = Column(Integer, nullable=False, default=DEFAULT_EF)  # hundredths, >= 130
    previous_interval = Column(Integer, nullable=False, default=0)  # days
    next_review_date = Column(DateTime(timezone=True), nullable=True)  # NULL = due now

    # Review tracking
    correct_streak = Column(Integer, nullable=False, default=0)
    review_history = Column(JSON, nullable=False, default=list)  # [{date, quality, interval, efFactor}]
    last_practiced = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<WordProgress({self.user_id}, word={self.word_id}, level={self.repetition_level})>"
