"""
SQLAlchemy database models for the Shiritori Bot.
Defines the database schema using async SQLAlchemy ORM.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String,
    Integer,
    DateTime,
    BigInteger,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class Player(Base):
    """
    A participant in one chat session.

    Rows are created on first contact and never deleted; score and word
    count are only ever changed through relative updates.
    """
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    username: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    nickname: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    joined_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    __table_args__ = (
        UniqueConstraint("session_id", "user_id", name="unique_player_per_session"),
    )


class UsedWord(Base):
    """
    One accepted word in a session's chain.

    `sequence` orders the chain; SQLite AUTOINCREMENT keeps it from ever
    being reused after the last entry is challenged away.
    """
    __tablename__ = "used_words"

    sequence: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    word: Mapped[str] = mapped_column(String(100), nullable=False)
    word_key: Mapped[str] = mapped_column(String(100), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Reading and value as resolved when the word was played
    kana: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    played_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    __table_args__ = (
        Index("wordcheck_idx", "session_id", "word_key"),
        {"sqlite_autoincrement": True},
    )


class CustomWord(Base):
    """A word added to one session's vocabulary by a player."""
    __tablename__ = "custom_words"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    kanji: Mapped[str] = mapped_column(String(100), nullable=False)
    kana: Mapped[str] = mapped_column(String(500), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    added_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    __table_args__ = (
        UniqueConstraint("session_id", "kanji", name="unique_custom_word_per_session"),
    )


class ReferenceWord(Base):
    """
    Dictionary entry: surface form -> comma-joined hiragana readings.

    Filled by the offline dictionary builder; only read by the bot.
    """
    __tablename__ = "words"

    kanji: Mapped[str] = mapped_column(String(100), primary_key=True)
    seq: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    kana: Mapped[str] = mapped_column(String(500), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class KanjiPoints(Base):
    """Point value of a single kanji character. Read-only reference data."""
    __tablename__ = "kanjipoints"

    kanji: Mapped[str] = mapped_column(String(4), primary_key=True)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
