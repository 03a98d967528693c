"""
Tests for services/player_ledger.py and nicknames.
"""
from models.game import NicknameResult, PlayerProfile

from conftest import ALICE, BOB, CAROL, SESSION, OTHER_SESSION


class TestNicknames:

    def test_set_nickname(self, play):
        async def scenario(engine):
            assert await engine.set_nickname(SESSION, ALICE, "Neko") == NicknameResult.OK
            [alice] = await engine.scores(SESSION)
            assert alice.nickname == "Neko"
            assert alice.display_name == "Neko"

        play(scenario)

    def test_same_nickname_is_no_change(self, play):
        async def scenario(engine):
            await engine.set_nickname(SESSION, ALICE, "Neko")
            assert await engine.set_nickname(SESSION, ALICE, " Neko ") == NicknameResult.NO_CHANGE

        play(scenario)

    def test_nickname_taken_ignoring_case(self, play):
        async def scenario(engine):
            await engine.set_nickname(SESSION, ALICE, "Neko")
            assert await engine.set_nickname(SESSION, BOB, "NEKO") == NicknameResult.NAME_TAKEN
            # Another session is free to use it
            assert await engine.set_nickname(OTHER_SESSION, BOB, "neko") == NicknameResult.OK

        play(scenario)

    def test_owner_may_change_case(self, play):
        async def scenario(engine):
            await engine.set_nickname(SESSION, ALICE, "neko")
            assert await engine.set_nickname(SESSION, ALICE, "Neko") == NicknameResult.OK

        play(scenario)

    def test_clear_nickname(self, play):
        async def scenario(engine):
            await engine.set_nickname(SESSION, ALICE, "Neko")
            assert await engine.set_nickname(SESSION, ALICE, "") == NicknameResult.OK
            [alice] = await engine.scores(SESSION)
            assert alice.nickname is None
            assert alice.display_name == "Alice Smith"
            assert await engine.set_nickname(SESSION, ALICE, "") == NicknameResult.NO_CHANGE

        play(scenario)


class TestPlayerLedger:

    def test_display_name_fallbacks(self, play):
        async def scenario(engine):
            await engine.set_nickname(SESSION, BOB, "")
            await engine.set_nickname(SESSION, CAROL, "")
            await engine.set_nickname(SESSION, PlayerProfile(user_id=9), "")
            names = {p.user_id: p.display_name for p in await engine.scores(SESSION)}
            assert names == {2: "Bob", 3: "carol", 9: "9"}

        play(scenario)

    def test_profile_update_keeps_score(self, play):
        async def scenario(engine):
            async with engine.db.transaction() as session:
                await engine.players.get_or_create(session, SESSION, ALICE)
                await engine.players.adjust_score(session, SESSION, ALICE.user_id, 7)
                await engine.players.adjust_word_count(session, SESSION, ALICE.user_id, 2)

            renamed = PlayerProfile(user_id=ALICE.user_id, first_name="Alicia", last_name="Smith", username="alice")
            async with engine.db.transaction() as session:
                player = await engine.players.get_or_create(session, SESSION, renamed)
                assert player.first_name == "Alicia"

            [alice] = await engine.scores(SESSION)
            assert (alice.first_name, alice.score, alice.word_count) == ("Alicia", 7, 2)

        play(scenario)

    def test_adjust_unknown_player(self, play):
        async def scenario(engine):
            async with engine.db.transaction() as session:
                return await engine.players.adjust_score(session, SESSION, 42, 1)

        assert play(scenario) is False

    def test_ranking_breaks_ties_by_join_order(self, play):
        async def scenario(engine):
            async with engine.db.transaction() as session:
                for profile in (ALICE, BOB, CAROL):
                    await engine.players.get_or_create(session, SESSION, profile)
                await engine.players.adjust_score(session, SESSION, BOB.user_id, 3)
                await engine.players.adjust_score(session, SESSION, CAROL.user_id, 3)
                await engine.players.adjust_score(session, SESSION, ALICE.user_id, -1)

            return [p.user_id for p in await engine.scores(SESSION)]

        assert play(scenario) == [BOB.user_id, CAROL.user_id, ALICE.user_id]
