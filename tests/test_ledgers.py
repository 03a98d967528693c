"""
Tests for database.py transactions and services/session_ledger.py.
"""
import pytest
from sqlalchemy.exc import IntegrityError

from database import StorageError
from models.db_models import Player

from conftest import ALICE, BOB, SESSION, OTHER_SESSION


class TestTransactions:

    def test_exception_rolls_back(self, play):
        async def scenario(engine):
            with pytest.raises(RuntimeError):
                async with engine.db.transaction() as session:
                    await engine.players.get_or_create(session, SESSION, ALICE)
                    await engine.words.append(session, SESSION, ALICE.user_id, "さくら")
                    raise RuntimeError("boom")

            assert await engine.scores(SESSION) == []
            assert await engine.history(SESSION) == []

        play(scenario)

    def test_database_error_becomes_storage_error(self, play):
        async def scenario(engine):
            with pytest.raises(StorageError):
                async with engine.db.transaction() as session:
                    session.add(Player(session_id=SESSION, user_id=1))
                    session.add(Player(session_id=SESSION, user_id=1))
                    await session.flush()

            assert await engine.scores(SESSION) == []

        play(scenario)

    def test_failed_savepoint_keeps_outer_work(self, play):
        async def scenario(engine):
            async with engine.db.transaction() as session:
                await engine.players.get_or_create(session, SESSION, ALICE)
                with pytest.raises(IntegrityError):
                    async with session.begin_nested():
                        await engine.players.adjust_score(session, SESSION, ALICE.user_id, 10)
                        session.add(Player(session_id=SESSION, user_id=ALICE.user_id))
                        await session.flush()

            [alice] = await engine.scores(SESSION)
            assert alice.score == 0

        play(scenario)


class TestSessionLedger:

    def test_first_last_count(self, play):
        async def scenario(engine):
            async with engine.db.transaction() as session:
                assert await engine.words.first(session, SESSION) is None
                assert await engine.words.last(session, SESSION) is None
                assert await engine.words.count(session, SESSION) == 0

                for profile in (ALICE, BOB):
                    await engine.players.get_or_create(session, SESSION, profile)
                await engine.words.append(session, SESSION, ALICE.user_id, "さくら")
                await engine.words.append(session, SESSION, BOB.user_id, "ラジオ", 2)
                await engine.words.append(session, OTHER_SESSION, BOB.user_id, "りす")

                assert (await engine.words.first(session, SESSION)).word == "さくら"
                assert (await engine.words.last(session, SESSION)).word == "ラジオ"
                assert await engine.words.count(session, SESSION) == 2
                assert await engine.words.is_used(session, SESSION, "ラジオ")
                assert not await engine.words.is_used(session, SESSION, "りす")

        play(scenario)

    def test_append_counts_words(self, play):
        async def scenario(engine):
            async with engine.db.transaction() as session:
                await engine.players.get_or_create(session, SESSION, ALICE)
                await engine.words.append(session, SESSION, ALICE.user_id, "さくら")
                await engine.words.append(session, SESSION, ALICE.user_id, "ラジオ")

            [alice] = await engine.scores(SESSION)
            assert alice.word_count == 2

        play(scenario)

    def test_opening_points_set_once(self, play):
        async def scenario(engine):
            async with engine.db.transaction() as session:
                await engine.words.append(session, SESSION, ALICE.user_id, "さくら")
                await engine.words.append(session, SESSION, BOB.user_id, "ラジオ", 2)
                assert await engine.words.set_opening_points(session, SESSION, 3)
                assert not await engine.words.set_opening_points(session, SESSION, 9)
                assert not await engine.words.set_opening_points(session, OTHER_SESSION, 9)

            history = await engine.history(SESSION)
            assert [e.points for e in history] == [3, 2]

        play(scenario)

    def test_remove_last_and_clear(self, play):
        async def scenario(engine):
            async with engine.db.transaction() as session:
                for word in ("りす", "すいか", "カー"):
                    await engine.words.append(session, SESSION, ALICE.user_id, word)
                await engine.words.append(session, OTHER_SESSION, ALICE.user_id, "さくら")

                removed = await engine.words.remove_last(session, SESSION)
                assert removed.word == "カー"

            assert [e.word for e in await engine.history(SESSION)] == ["りす", "すいか"]

            async with engine.db.transaction() as session:
                assert await engine.words.clear(session, SESSION) == 2
                assert await engine.words.remove_last(session, SESSION) is None

            assert await engine.history(SESSION) == []
            assert len(await engine.history(OTHER_SESSION)) == 1

        play(scenario)
