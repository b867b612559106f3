"""Database models for the word drill backend."""
from sqlalchemy import JSON, Column, Float, Index, Integer, String

from wordrill.models.base import Base, TimestampMixin


class Word(Base):
    """Practice word with its correct and incorrect spellings."""

    __tablename__ = "words"

    word = Column(String, primary_key=True)
    correct = Column(String, nullable=False)
    incorrect = Column(JSON, nullable=False, default=list)


class User(Base, TimestampMixin):
    """User model, created once per distinct email on sign-in."""

    __tablename__ = "users"

    user_id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=True)
    provider = Column(String, nullable=False, default="google")


class WordStatistic(Base, TimestampMixin):
    """Per-user mastery counters for one word."""

    __tablename__ = "word_statistics"
    __table_args__ = (
        Index("ix_word_statistics_user_id_success_ratio", "user_id", "success_ratio"),
    )

    user_id = Column(String, primary_key=True)
    word = Column(String, primary_key=True)
    attempts = Column(Integer, nullable=False, default=0)
    successes = Column(Integer, nullable=False, default=0)
    success_ratio = Column(Float, nullable=False, default=0.0)
