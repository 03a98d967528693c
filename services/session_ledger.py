"""
Session Ledger for the Shiritori Bot.
Append-only word history of each chat session.
"""
import logging
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from config import LOGGER_NAME_GAME
from models.db_models import UsedWord
from services.player_ledger import PlayerLedger

logger = logging.getLogger(LOGGER_NAME_GAME)


def word_key(word: str) -> str:
    """Key used to compare words case-insensitively."""
    return word.strip().casefold()


class SessionLedger:
    """
    Ordered word history per session.

    Every method takes the caller's AsyncSession so that history and
    player counters change inside the same transaction.
    """

    def __init__(self, players: PlayerLedger):
        self.players = players

    async def append(
        self,
        session: AsyncSession,
        session_id: int,
        user_id: int,
        word: str,
        points: int = 0,
        kana: str = "",
        value: Optional[int] = None
    ) -> UsedWord:
        """
        Add a word to the chain and count it for its author.

        `kana` and `value` record the reading and lexicon value the word was
        accepted with; `value` defaults to `points`.
        """
        entry = UsedWord(
            session_id=session_id,
            user_id=user_id,
            word=word,
            word_key=word_key(word),
            points=points,
            kana=kana,
            value=points if value is None else value,
        )
        session.add(entry)
        await session.flush()

        await self.players.adjust_word_count(session, session_id, user_id, 1)

        logger.debug(
            f"Word recorded: '{word}' by user={user_id}, session={session_id}, "
            f"sequence={entry.sequence}"
        )
        return entry

    async def first(self, session: AsyncSession, session_id: int) -> Optional[UsedWord]:
        stmt = (
            select(UsedWord)
            .where(UsedWord.session_id == session_id)
            .order_by(UsedWord.sequence.asc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def last(self, session: AsyncSession, session_id: int) -> Optional[UsedWord]:
        stmt = (
            select(UsedWord)
            .where(UsedWord.session_id == session_id)
            .order_by(UsedWord.sequence.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def remove_last(self, session: AsyncSession, session_id: int) -> Optional[UsedWord]:
        """
        Delete the most recent entry and return it.

        The caller is responsible for reversing the author's score and
        word count in the same transaction.
        """
        entry = await self.last(session, session_id)
        if entry is None:
            return None
        await session.execute(delete(UsedWord).where(UsedWord.sequence == entry.sequence))
        return entry

    async def set_opening_points(self, session: AsyncSession, session_id: int, points: int) -> bool:
        """
        Give the opening entry its points.

        Only an opening entry still at zero points is updated, so the
        award happens once. Returns True if a row changed.
        """
        opening = await self.first(session, session_id)
        if opening is None:
            return False
        result = await session.execute(
            update(UsedWord)
            .where(
                UsedWord.sequence == opening.sequence,
                UsedWord.points == 0
            )
            .values(points=points)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def count(self, session: AsyncSession, session_id: int) -> int:
        stmt = select(func.count()).select_from(UsedWord).where(UsedWord.session_id == session_id)
        result = await session.execute(stmt)
        return result.scalar_one()

    async def history(self, session: AsyncSession, session_id: int) -> List[UsedWord]:
        """All entries of the session, oldest first."""
        stmt = (
            select(UsedWord)
            .where(UsedWord.session_id == session_id)
            .order_by(UsedWord.sequence.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def is_used(self, session: AsyncSession, session_id: int, word: str) -> bool:
        """Check if a word has already been played in this session."""
        stmt = select(UsedWord.sequence).where(
            UsedWord.session_id == session_id,
            UsedWord.word_key == word_key(word)
        ).limit(1)
        result = await session.execute(stmt)
        return result.first() is not None

    async def clear(self, session: AsyncSession, session_id: int) -> int:
        """Delete the whole history of a session. Returns the number of entries removed."""
        result = await session.execute(
            delete(UsedWord).where(UsedWord.session_id == session_id)
        )
        logger.info(f"Word history cleared: session={session_id}, entries={result.rowcount}")
        return result.rowcount
