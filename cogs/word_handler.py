"""
Word Handler Cog for the Shiritori Bot.
Turns channel messages into word submissions.
"""
import logging
import re

import discord
from discord.ext import commands

from config import LOGGER_NAME_GAME, InvalidReason
from database import StorageError
from models.game import (
    Accepted,
    Outcome,
    PlayerProfile,
    RejectedChainMismatch,
    RejectedDuplicate,
    RejectedInvalid,
    RejectedNotResponding,
    RejectedWaitTurn,
)
from services.turn_engine import turn_engine

logger = logging.getLogger(LOGGER_NAME_GAME)

# Kana, kanji and the iteration/long-vowel marks
JAPANESE_CHARS = "ぁ-ゖァ-ヺー々〆ヶ㐀-䶿一-鿿豈-﫿"
# At least one Japanese character; Latin letters and digits may join them (Tシャツ)
WORD_EXP = re.compile(f"^(?=.*[{JAPANESE_CHARS}])[{JAPANESE_CHARS}A-Za-z0-9]+$")


def profile_of(user: discord.abc.User) -> PlayerProfile:
    """Map a Discord user onto the profile fields the ledger keeps."""
    return PlayerProfile(
        user_id=user.id,
        first_name=getattr(user, "global_name", None) or user.name,
        last_name="",
        username=user.name,
    )


def describe_outcome(outcome: Outcome, player_name: str) -> str:
    """Plain-text reply for a submission outcome."""
    lines = []
    award = getattr(outcome, "opening_award", None)
    if award is not None:
        lines.append(f"🎉 The opening word 「{award.word}」 is now worth {award.points} pts.")

    if isinstance(outcome, Accepted):
        if outcome.is_first_word:
            lines.append(f"✅ {player_name} opened with 「{outcome.word}」. Who answers?")
        else:
            lines.append(f"✅ 「{outcome.word}」 +{outcome.points} pts for {player_name}.")
    elif isinstance(outcome, RejectedWaitTurn):
        lines.append(f"⏳ {player_name}, wait for someone to answer 「{outcome.last_word}」.")
    elif isinstance(outcome, RejectedNotResponding):
        lines.append(f"↩️ {player_name}, reply to the current word 「{outcome.last_word}」.")
    elif isinstance(outcome, RejectedDuplicate):
        lines.append(
            f"❌ 「{outcome.word}」 was already played. {player_name} loses "
            f"{outcome.penalty_applied} pts. New game!"
        )
    elif isinstance(outcome, RejectedInvalid):
        if outcome.reason == InvalidReason.ENDS_IN_FORBIDDEN_MORA:
            reason = "言葉は'ん'が終わることが禁止されています"
        else:
            reason = "無効言葉"
        lines.append(
            f"❌ {reason}: 「{outcome.word}」. {player_name} loses "
            f"{outcome.penalty_applied} pts. New game!"
        )
    elif isinstance(outcome, RejectedChainMismatch):
        lines.append(
            f"❌ 初めの仮名は終わりのかなと一致しません: "
            f"{outcome.last_word}「{outcome.last_kana}」-> {outcome.word}「{outcome.kana}」"
        )
    return "\n".join(lines)


class WordHandler(commands.Cog):
    """Cog for handling word submissions."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        """Handle incoming messages for word submissions."""
        # Ignore bots
        if message.author.bot:
            return

        word = message.content.strip()
        if not word or not WORD_EXP.match(word):
            # Not a Japanese word, just chat
            return

        await self._process_word(message, word)

    def _is_reply_to_bot(self, message: discord.Message) -> bool:
        reference = message.reference
        if reference is None or not isinstance(reference.resolved, discord.Message):
            return False
        return self.bot.user is not None and reference.resolved.author.id == self.bot.user.id

    async def _process_word(self, message: discord.Message, word: str):
        """Submit a word and report the outcome."""
        try:
            outcome = await turn_engine.submit(
                session_id=message.channel.id,
                profile=profile_of(message.author),
                text=word,
                is_reply_to_last_word=self._is_reply_to_bot(message),
                is_private=isinstance(message.channel, discord.DMChannel),
            )
        except StorageError:
            await message.channel.send("⚠️ Could not record that word, please try again.")
            return

        if isinstance(outcome, Accepted):
            try:
                await message.add_reaction("✅")
            except discord.HTTPException:
                pass

        await message.channel.send(describe_outcome(outcome, message.author.display_name))


async def setup(bot: commands.Bot):
    """Setup function for loading the cog."""
    await bot.add_cog(WordHandler(bot))
