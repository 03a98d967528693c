"""
Turn Engine for the Shiritori Bot.
Validates submissions, scores them and keeps both ledgers consistent.
"""
import logging
from typing import Iterable, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from config import SETTINGS, Settings, LOGGER_NAME_GAME, InvalidReason
from database import DatabaseManager, StorageError, db_manager
from models.game import (
    Accepted,
    ChallengeResult,
    CustomWordResult,
    NicknameResult,
    OpeningAward,
    Outcome,
    PlayerInfo,
    PlayerProfile,
    RejectedChainMismatch,
    RejectedDuplicate,
    RejectedInvalid,
    RejectedNotResponding,
    RejectedWaitTurn,
    RemoveWordResult,
    WordEntry,
    WordReading,
)
from services.kana import ends_in_forbidden_mora, is_kana, matches, normalize_readings
from services.lexicon import Lexicon
from services.player_ledger import PlayerLedger
from services.session_ledger import SessionLedger

logger = logging.getLogger(LOGGER_NAME_GAME)


class TurnEngine:
    """
    Entry point for everything the chat transport asks of the game.

    Holds no per-session state: every call addresses its session by id and
    runs in its own transaction.
    """

    def __init__(self, database: DatabaseManager, settings: Settings = SETTINGS):
        self.db = database
        self.settings = settings
        self.lexicon = Lexicon()
        self.players = PlayerLedger()
        self.words = SessionLedger(self.players)

    # Submissions

    async def submit(
        self,
        session_id: int,
        profile: PlayerProfile,
        text: str,
        is_reply_to_last_word: bool = True,
        is_private: bool = False
    ) -> Outcome:
        """
        Play a word in a session.

        Args:
            session_id: Chat the word was sent in
            profile: Who sent it
            text: The raw word
            is_reply_to_last_word: Whether the message replied to the bot's
                rendering of the current word
            is_private: Whether the chat is a one-on-one chat with the bot

        Returns:
            One of the Outcome subclasses
        """
        word = text.strip()
        if not word:
            raise ValueError("Cannot submit an empty word")

        async with self.db.transaction() as session:
            await self.players.get_or_create(session, session_id, profile)

            last = await self.words.last(session, session_id)
            if last is not None:
                if last.user_id == profile.user_id and self._turns_alternate(is_private):
                    logger.debug(f"Out of turn: user={profile.user_id}, session={session_id}")
                    return RejectedWaitTurn(last.word)
                if self.settings.require_reply and not is_reply_to_last_word:
                    return RejectedNotResponding(last.word)

            reading = await self.lexicon.lookup(session, session_id, word)

            award = None
            if self.settings.award_opening_before_validation:
                award = await self._award_opening(session, session_id, reading)

            if await self.words.is_used(session, session_id, word):
                penalty = await self._lose(session, session_id, profile.user_id)
                logger.info(f"Duplicate word '{word}': user={profile.user_id}, session={session_id}")
                return RejectedDuplicate(word, penalty, award)

            if not reading.is_valid:
                reason = InvalidReason.NOT_FOUND
                if ends_in_forbidden_mora(reading.kana):
                    reason = InvalidReason.ENDS_IN_FORBIDDEN_MORA
                penalty = await self._lose(session, session_id, profile.user_id)
                logger.info(f"Invalid word '{word}' ({reason}): user={profile.user_id}, session={session_id}")
                return RejectedInvalid(word, reason, penalty, award)

            if last is not None and not matches(last.kana, reading.kana):
                return RejectedChainMismatch(word, reading.kana, last.word, last.kana, award)

            if not self.settings.award_opening_before_validation:
                award = await self._award_opening(session, session_id, reading)

            is_first_word = last is None
            points = 0 if is_first_word else reading.points
            await self.words.append(
                session, session_id, profile.user_id, word, points,
                kana=reading.kana, value=reading.points
            )
            await self.players.adjust_score(session, session_id, profile.user_id, points)

            logger.info(
                f"Word accepted: '{word}' ({reading.kana}) for {points} pts, "
                f"user={profile.user_id}, session={session_id}"
            )
            return Accepted(word, points, is_first_word, award)

    def _turns_alternate(self, is_private: bool) -> bool:
        if not self.settings.require_turn_alternation:
            return False
        return self.settings.private_turn_alternation or not is_private

    async def _award_opening(
        self,
        session: AsyncSession,
        session_id: int,
        reading: WordReading
    ) -> Optional[OpeningAward]:
        """
        Score the opening word once the chain has been answered.

        Happens when the opening entry is still unscored and the new word's
        first kana chains from it, whether or not the new word is valid. The
        opening entry is scored with the reading and value it was played
        with, so later changes to the vocabulary do not affect it.
        """
        opening = await self.words.first(session, session_id)
        if opening is None or opening.points != 0 or opening.value <= 0:
            return None
        if not matches(opening.kana, reading.kana):
            return None

        if not await self.words.set_opening_points(session, session_id, opening.value):
            return None
        await self.players.adjust_score(session, session_id, opening.user_id, opening.value)

        logger.info(
            f"Opening word '{opening.word}' awarded {opening.value} pts: "
            f"user={opening.user_id}, session={session_id}"
        )
        return OpeningAward(opening.word, opening.user_id, opening.value)

    async def _lose(self, session: AsyncSession, session_id: int, user_id: int) -> int:
        """Apply the loss penalty and start the chain over. Returns the penalty."""
        penalty = self.settings.loss_penalty
        await self.players.adjust_score(session, session_id, user_id, -penalty)
        await self.words.clear(session, session_id)
        return penalty

    async def challenge(self, session_id: int, user_id: int) -> Optional[ChallengeResult]:
        """
        Let the author of the current word take it back.

        Returns None when there is no current word or someone else played it.
        """
        async with self.db.transaction() as session:
            last = await self.words.last(session, session_id)
            if last is None or last.user_id != user_id:
                return None

            removed = WordEntry.from_row(last)
            await self.words.remove_last(session, session_id)

            penalty = self.settings.challenge_penalty
            await self.players.adjust_score(session, session_id, user_id, -(removed.points + penalty))
            await self.players.adjust_word_count(session, session_id, user_id, -1)

        logger.info(
            f"Word challenged: '{removed.word}' by user={user_id}, session={session_id}, "
            f"reversed={removed.points}, penalty={penalty}"
        )
        return ChallengeResult(removed, removed.points, penalty)

    async def new_game(self, session_id: int) -> int:
        """Clear the word history of a session. Returns the number of entries removed."""
        async with self.db.transaction() as session:
            removed = await self.words.clear(session, session_id)
            if self.settings.new_game_resets_scores:
                await self.players.reset_scores(session, session_id)
        logger.info(f"New game: session={session_id}")
        return removed

    # Players

    async def set_nickname(self, session_id: int, profile: PlayerProfile, name: str) -> str:
        """
        Set or clear (empty name) a player's nickname.

        Returns a NicknameResult value.
        """
        nickname = name.strip() or None
        async with self.db.transaction() as session:
            player = await self.players.get_or_create(session, session_id, profile)
            if player.nickname == nickname:
                return NicknameResult.NO_CHANGE
            if nickname and await self.players.nickname_in_use(
                session, session_id, nickname, exclude_user_id=profile.user_id
            ):
                return NicknameResult.NAME_TAKEN
            await self.players.set_nickname(session, session_id, profile.user_id, nickname)

        logger.info(f"Nickname set: user={profile.user_id}, session={session_id}, nickname={nickname}")
        return NicknameResult.OK

    # Custom words

    async def add_custom_word(
        self,
        session_id: int,
        profile: PlayerProfile,
        kanji: str,
        kana_list: Union[str, Iterable[str]]
    ) -> str:
        """
        Add (or replace) a word in the session's own vocabulary.

        The contributor gets the custom word bonus; a replaced word's bonus is
        taken back from its previous contributor in the same transaction.

        Returns a CustomWordResult value.
        """
        kanji = kanji.strip()
        if isinstance(kana_list, str):
            kana_list = [kana_list]
        kana = normalize_readings(kana_list)
        readings = kana.split(",") if kana else []
        if not kanji or not readings or not all(is_kana(r) for r in readings):
            return CustomWordResult.FAILED
        if ends_in_forbidden_mora(kana):
            return CustomWordResult.ALREADY_ENDS_IN_FORBIDDEN_MORA

        try:
            async with self.db.transaction() as session:
                standard = await self.lexicon.lookup_standard(session, kanji)
                if standard is not None:
                    if standard.is_valid:
                        return CustomWordResult.ALREADY_EXISTS
                    if ends_in_forbidden_mora(standard.kana):
                        return CustomWordResult.ALREADY_ENDS_IN_FORBIDDEN_MORA

                await self.players.get_or_create(session, session_id, profile)
                points = await self.lexicon.word_points(session, kanji)

                async with session.begin_nested():
                    await self._remove_custom_word(session, session_id, kanji)
                    await self.lexicon.insert_custom_word(
                        session, session_id, profile.user_id, kanji, kana, points
                    )
                    await self.players.adjust_score(
                        session, session_id, profile.user_id, self.settings.custom_word_bonus
                    )
        except StorageError:
            logger.warning(f"Could not add custom word '{kanji}': session={session_id}")
            return CustomWordResult.FAILED

        logger.info(f"Custom word added: '{kanji}' ({kana}) by user={profile.user_id}, session={session_id}")
        return CustomWordResult.OK

    async def remove_custom_word(self, session_id: int, kanji: str) -> str:
        """Remove a custom word and take back its bonus. Returns a RemoveWordResult value."""
        async with self.db.transaction() as session:
            removed = await self._remove_custom_word(session, session_id, kanji.strip())
        if not removed:
            return RemoveWordResult.NOT_FOUND
        logger.info(f"Custom word removed: '{kanji}', session={session_id}")
        return RemoveWordResult.OK

    async def _remove_custom_word(self, session: AsyncSession, session_id: int, kanji: str) -> bool:
        custom = await self.lexicon.get_custom_word(session, session_id, kanji)
        if custom is None:
            return False
        async with session.begin_nested():
            contributor = custom.user_id
            await self.lexicon.delete_custom_word(session, custom)
            await self.players.adjust_score(session, session_id, contributor, -self.settings.custom_word_bonus)
        return True

    # Read-only views

    async def scores(self, session_id: int) -> List[PlayerInfo]:
        async with self.db.read() as session:
            players = await self.players.ranked_list(session, session_id)
            return [PlayerInfo.from_row(p) for p in players]

    async def history(self, session_id: int) -> List[WordEntry]:
        async with self.db.read() as session:
            entries = await self.words.history(session, session_id)
            return [WordEntry.from_row(e) for e in entries]

    async def current_word(self, session_id: int) -> Optional[WordEntry]:
        async with self.db.read() as session:
            last = await self.words.last(session, session_id)
            return WordEntry.from_row(last) if last is not None else None

    async def reading(self, session_id: int, word: str) -> WordReading:
        """Look up a word's readings and points, for display."""
        async with self.db.read() as session:
            return await self.lexicon.lookup(session, session_id, word)


# Global turn engine instance
turn_engine = TurnEngine(db_manager)
