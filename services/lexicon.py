"""
Lexicon Service for the Shiritori Bot.
Resolves readings and point values from the reference dictionary, with
per-session custom words layered on top.
"""
import logging
import re
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import LOGGER_NAME_GAME, ReadingSource, DERIVED_SUFFIX, DERIVED_SUFFIX_KANA
from models.db_models import CustomWord, KanjiPoints, ReferenceWord
from models.game import WordReading
from services.kana import ends_in_forbidden_mora, split_readings

logger = logging.getLogger(LOGGER_NAME_GAME)

KANJI_EXP = re.compile("[㐀-䶿一-鿿豈-﫿々]")


class Lexicon:
    """
    Read side of the reference dictionary plus the session custom-word table.
    All methods run on a caller-provided session so they join its transaction.
    """

    async def lookup(self, session: AsyncSession, session_id: int, word: str) -> WordReading:
        """
        Resolve a word's readings and points.

        Order: reference dictionary, then the session's custom words, then a
        derived reading for words ending in 性. A zero-point reading is
        returned when nothing scores, so the caller can still tell a word
        ending in ん from an unknown one.
        """
        standard = await self.lookup_standard(session, word)
        if standard is not None and standard.is_valid:
            return standard

        custom = await self.get_custom_word(session, session_id, word)
        if custom is not None:
            reading = self._checked(WordReading(word, custom.kana, custom.points, ReadingSource.CUSTOM))
            if reading.is_valid:
                return reading

        if standard is not None:
            return standard

        derived = await self._lookup_derived(session, session_id, word)
        if derived is not None:
            return derived

        return WordReading(word)

    async def lookup_standard(self, session: AsyncSession, word: str) -> Optional[WordReading]:
        row = await session.get(ReferenceWord, word)
        if row is None:
            return None
        return self._checked(WordReading(word, row.kana, row.points, ReadingSource.STANDARD))

    async def _lookup_derived(
        self,
        session: AsyncSession,
        session_id: int,
        word: str
    ) -> Optional[WordReading]:
        """Resolve <noun>性 as the noun's readings followed by せい."""
        if not word.endswith(DERIVED_SUFFIX) or len(word) <= len(DERIVED_SUFFIX):
            return None

        base = await self.lookup(session, session_id, word[:-len(DERIVED_SUFFIX)])
        readings = split_readings(base.kana)
        if not readings:
            return None

        kana = ",".join(r + DERIVED_SUFFIX_KANA for r in readings)
        points = await self.word_points(session, word)
        logger.debug(f"Derived reading for '{word}': {kana} ({points} pts)")
        return WordReading(word, kana, points, ReadingSource.DERIVED)

    @staticmethod
    def _checked(reading: WordReading) -> WordReading:
        """
        Treat inconsistent rows as unknown words.

        A reading with points must have kana, and a reading without points
        must be explained by ending in ん.
        """
        has_kana = bool(split_readings(reading.kana))
        if reading.points > 0 and has_kana:
            return reading
        if reading.points <= 0 and has_kana and ends_in_forbidden_mora(reading.kana):
            return WordReading(reading.word, reading.kana, 0, reading.source)
        if reading.points != 0 or has_kana:
            logger.warning(
                f"Inconsistent {reading.source} entry for '{reading.word}': "
                f"kana='{reading.kana}', points={reading.points}"
            )
        return WordReading(reading.word)

    async def word_points(self, session: AsyncSession, word: str) -> int:
        """
        Point value of a word not in the dictionary.

        Kana-only words are worth 1; otherwise the highest point value of
        any of its kanji.
        """
        kanji = set(KANJI_EXP.findall(word))
        if not kanji:
            return 1
        stmt = select(KanjiPoints.points).where(KanjiPoints.kanji.in_(kanji))
        result = await session.execute(stmt)
        return max([1, *result.scalars().all()])

    async def get_custom_word(
        self,
        session: AsyncSession,
        session_id: int,
        kanji: str
    ) -> Optional[CustomWord]:
        stmt = select(CustomWord).where(
            CustomWord.session_id == session_id,
            CustomWord.kanji == kanji
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_custom_word(
        self,
        session: AsyncSession,
        session_id: int,
        user_id: int,
        kanji: str,
        kana: str,
        points: int
    ) -> CustomWord:
        custom = CustomWord(
            session_id=session_id,
            user_id=user_id,
            kanji=kanji,
            kana=kana,
            points=points,
        )
        session.add(custom)
        await session.flush()
        return custom

    async def delete_custom_word(self, session: AsyncSession, custom: CustomWord) -> None:
        await session.delete(custom)
        # Flush now so a replacement row with the same key can be inserted
        await session.flush()

    async def list_custom_words(self, session: AsyncSession, session_id: int) -> List[CustomWord]:
        stmt = (
            select(CustomWord)
            .where(CustomWord.session_id == session_id)
            .order_by(CustomWord.kanji)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
