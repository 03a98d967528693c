"""
Player Ledger for the Shiritori Bot.
Per-session player rows, scores and word counts.
"""
import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from config import LOGGER_NAME_GAME
from models.db_models import Player
from models.game import PlayerProfile

logger = logging.getLogger(LOGGER_NAME_GAME)


class PlayerLedger:
    """
    Score keeping for players of each session.

    Score and word count only move by relative UPDATEs, so adjustments
    made in different places compose without reading the old value.
    """

    async def get(self, session: AsyncSession, session_id: int, user_id: int) -> Optional[Player]:
        stmt = select(Player).where(
            Player.session_id == session_id,
            Player.user_id == user_id
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create(
        self,
        session: AsyncSession,
        session_id: int,
        profile: PlayerProfile
    ) -> Player:
        """
        Fetch the player, creating the row on first contact.
        Changed profile fields are saved; score and word count are left alone.
        """
        player = await self.get(session, session_id, profile.user_id)

        if player is None:
            player = Player(
                session_id=session_id,
                user_id=profile.user_id,
                first_name=profile.first_name,
                last_name=profile.last_name,
                username=profile.username,
                score=0,
                word_count=0,
            )
            session.add(player)
            await session.flush()
            logger.info(f"Player joined: user={profile.user_id}, session={session_id}")
            return player

        changed = False
        for field in ("first_name", "last_name", "username"):
            value = getattr(profile, field)
            if getattr(player, field) != value:
                setattr(player, field, value)
                changed = True
        if changed:
            await session.flush()
            logger.debug(f"Player info updated: user={profile.user_id}, session={session_id}")
        return player

    async def adjust_score(self, session: AsyncSession, session_id: int, user_id: int, delta: int) -> bool:
        """Add `delta` to a player's score. Returns False if the player does not exist."""
        if delta == 0:
            return True
        result = await session.execute(
            update(Player)
            .where(
                Player.session_id == session_id,
                Player.user_id == user_id
            )
            .values(score=Player.score + delta)
        )
        if result.rowcount == 0:
            logger.warning(f"Score update for unknown player: user={user_id}, session={session_id}")
            return False
        return True

    async def adjust_word_count(self, session: AsyncSession, session_id: int, user_id: int, delta: int) -> bool:
        """Add `delta` to a player's word count. Returns False if the player does not exist."""
        result = await session.execute(
            update(Player)
            .where(
                Player.session_id == session_id,
                Player.user_id == user_id
            )
            .values(word_count=Player.word_count + delta)
        )
        if result.rowcount == 0:
            logger.warning(f"Word count update for unknown player: user={user_id}, session={session_id}")
            return False
        return True

    async def ranked_list(self, session: AsyncSession, session_id: int) -> List[Player]:
        """Players of a session by descending score, earliest joiner first on ties."""
        stmt = (
            select(Player)
            .where(Player.session_id == session_id)
            .order_by(Player.score.desc(), Player.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def nickname_in_use(
        self,
        session: AsyncSession,
        session_id: int,
        candidate: str,
        exclude_user_id: Optional[int] = None
    ) -> bool:
        """Check case-insensitively whether another player of the session uses a nickname."""
        stmt = select(Player.user_id, Player.nickname).where(
            Player.session_id == session_id,
            Player.nickname.is_not(None)
        )
        result = await session.execute(stmt)
        wanted = candidate.casefold()
        return any(
            nickname.casefold() == wanted
            for user_id, nickname in result.all()
            if user_id != exclude_user_id
        )

    async def set_nickname(
        self,
        session: AsyncSession,
        session_id: int,
        user_id: int,
        nickname: Optional[str]
    ) -> None:
        await session.execute(
            update(Player)
            .where(
                Player.session_id == session_id,
                Player.user_id == user_id
            )
            .values(nickname=nickname)
        )

    async def reset_scores(self, session: AsyncSession, session_id: int) -> None:
        """Zero every player's score and word count without removing the players."""
        await session.execute(
            update(Player)
            .where(Player.session_id == session_id)
            .values(score=0, word_count=0)
        )
