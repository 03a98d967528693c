"""
Shared pytest fixtures for the Shiritori Bot test suite.

Every test gets its own SQLite file with a small dictionary loaded, and
drives the async engine through `asyncio.run`.
"""
import asyncio

import pytest
from sqlalchemy.pool import NullPool

from config import Settings
from database import DatabaseManager
from models.db_models import KanjiPoints, ReferenceWord
from models.game import PlayerProfile
from services.turn_engine import TurnEngine


# ---------------------------------------------------------------------------
# Test dictionary
# ---------------------------------------------------------------------------

DICTIONARY = [
    # (word, kana, points)
    ("さくら", "さくら", 3),
    ("桜", "さくら", 4),
    ("ラジオ", "らじお", 2),
    ("おにぎり", "おにぎり", 1),
    ("りす", "りす", 1),
    ("すいか", "すいか", 2),
    ("カー", "かー", 2),
    ("あめ", "あめ", 1),
    ("めだか", "めだか", 2),
    ("きしゃ", "きしゃ", 2),
    ("しゃかい", "しゃかい", 3),
    ("しか", "しか", 1),
    ("いし", "いし", 1),
    ("たぬき", "たぬき", 2),
    ("可能", "かのう", 3),
    ("Tシャツ", "てぃーしゃつ", 2),
    # Words ending in ん are stored with zero points
    ("ごはん", "ごはん", 0),
    ("らーめん", "らーめん", 0),
    # Inconsistent row: a reading but no points
    ("ふしぎ", "ふしぎ", 0),
]

KANJI_POINTS = [
    ("桜", 4),
    ("可", 2),
    ("能", 4),
    ("性", 3),
    ("猫", 3),
    ("舌", 5),
]

ALICE = PlayerProfile(user_id=1, first_name="Alice", last_name="Smith", username="alice")
BOB = PlayerProfile(user_id=2, first_name="Bob", last_name="", username="bob")
CAROL = PlayerProfile(user_id=3, first_name="", last_name="", username="carol")

SESSION = 1001
OTHER_SESSION = 2002


async def seed_dictionary(database: DatabaseManager) -> None:
    async with database.transaction() as session:
        session.add_all(
            ReferenceWord(kanji=word, kana=kana, points=points)
            for word, kana, points in DICTIONARY
        )
        session.add_all(
            KanjiPoints(kanji=kanji, points=points)
            for kanji, points in KANJI_POINTS
        )


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'torigemu.db'}"


@pytest.fixture
def play(db_url):
    """
    Run an async scenario against a fresh TurnEngine.

    Usage:
        async def scenario(engine):
            ...
        result = play(scenario, loss_penalty=3)

    `pooled=True` keeps the default connection pool, for scenarios that
    run transactions side by side.
    """
    def run(scenario, pooled=False, **overrides):
        async def wrapper():
            engine_kwargs = {} if pooled else {"poolclass": NullPool}
            database = DatabaseManager(db_url, **engine_kwargs)
            await database.init()
            await seed_dictionary(database)
            engine = TurnEngine(database, Settings(**overrides))
            try:
                return await scenario(engine)
            finally:
                await database.close()

        return asyncio.run(wrapper())

    return run
