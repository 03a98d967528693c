"""
Game Commands Cog for the Shiritori Bot.
Slash commands for everything other than playing a word.
"""
import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from config import SETTINGS, LOGGER_NAME_GAME
from database import StorageError
from models.game import CustomWordResult, NicknameResult, RemoveWordResult
from services.turn_engine import turn_engine
from cogs.word_handler import profile_of

logger = logging.getLogger(LOGGER_NAME_GAME)

HELP_TEXT = (
    "**しりとり**\n"
    "Send a Japanese noun whose first kana matches the last kana of the current word.\n"
    "• The opening word scores once somebody answers it.\n"
    "• A word ending in ん, an unknown word or a repeated word loses "
    f"{SETTINGS.loss_penalty} pts and starts a new game.\n"
    "• `/shiritori challenge` takes back your own last word.\n"
    "• `/shiritori addword` teaches the bot a word for this channel "
    f"(+{SETTINGS.custom_word_bonus} pts)."
)


class GameCommands(commands.Cog):
    """Cog containing all game-related slash commands."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    shiritori = app_commands.Group(
        name="shiritori",
        description="Shiritori game commands"
    )

    async def cog_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError
    ):
        original = getattr(error, "original", error)
        if isinstance(original, StorageError):
            message = "⚠️ The game database is busy, please try again."
        else:
            logger.error(f"Command error: {error}", exc_info=error)
            message = "⚠️ Something went wrong."
        if interaction.response.is_done():
            await interaction.followup.send(message, ephemeral=True)
        else:
            await interaction.response.send_message(message, ephemeral=True)

    @shiritori.command(name="newgame", description="Start a new game with a fresh word list")
    async def new_game(self, interaction: discord.Interaction):
        await turn_engine.new_game(interaction.channel_id)
        await interaction.response.send_message(
            f"New game started by {interaction.user.display_name}.\nWho wants to go first?"
        )

    @shiritori.command(name="showword", description="Show the current word")
    async def show_word(self, interaction: discord.Interaction):
        entry = await turn_engine.current_word(interaction.channel_id)
        if entry is None:
            await interaction.response.send_message("There is no current word.")
            return
        await interaction.response.send_message(f"Current word: {entry.word}「{entry.kana}」")

    @shiritori.command(name="showscores", description="Show the current scores")
    async def show_scores(self, interaction: discord.Interaction):
        players = await turn_engine.scores(interaction.channel_id)
        if not players:
            await interaction.response.send_message("Nobody has played yet.")
            return
        lines = [
            f"{rank}. {p.display_name}: {p.score} pts ({p.word_count} words)"
            for rank, p in enumerate(players, 1)
        ]
        await interaction.response.send_message("\n".join(lines))

    @shiritori.command(name="history", description="Show the words played in this game")
    async def show_history(self, interaction: discord.Interaction):
        entries = await turn_engine.history(interaction.channel_id)
        if not entries:
            await interaction.response.send_message("No words have been played yet.")
            return
        chain = " → ".join(f"{e.word}({e.points})" for e in entries)
        await interaction.response.send_message(chain)

    @shiritori.command(name="challenge", description="Take back the word you just played")
    async def challenge(self, interaction: discord.Interaction):
        result = await turn_engine.challenge(interaction.channel_id, interaction.user.id)
        if result is None:
            await interaction.response.send_message(
                "Only the player of the current word can take it back.",
                ephemeral=True
            )
            return
        lost = result.points_reversed + result.penalty_applied
        await interaction.response.send_message(
            f"「{result.removed.word}」 was taken back. "
            f"{interaction.user.display_name} loses {lost} pts."
        )

    @shiritori.command(name="nick", description="Set your nickname for this channel")
    @app_commands.describe(name="New nickname (leave empty to clear it)")
    async def nick(self, interaction: discord.Interaction, name: Optional[str] = None):
        result = await turn_engine.set_nickname(
            interaction.channel_id, profile_of(interaction.user), name or ""
        )
        replies = {
            NicknameResult.OK: f"Nickname set to **{name}**." if name else "Nickname cleared.",
            NicknameResult.NAME_TAKEN: f"**{name}** is already taken.",
            NicknameResult.NO_CHANGE: "Nothing to change.",
        }
        await interaction.response.send_message(
            replies[result],
            ephemeral=result != NicknameResult.OK
        )

    @shiritori.command(name="addword", description="Add a word to this channel's vocabulary")
    @app_commands.describe(
        word="The word as written",
        kana="Reading(s) in kana, separated by commas"
    )
    async def add_word(self, interaction: discord.Interaction, word: str, kana: str):
        result = await turn_engine.add_custom_word(
            interaction.channel_id, profile_of(interaction.user), word, kana.split(",")
        )
        replies = {
            CustomWordResult.OK: f"Added 「{word}」「{kana}」 (+{SETTINGS.custom_word_bonus} pts).",
            CustomWordResult.ALREADY_EXISTS: f"「{word}」 is already in the dictionary.",
            CustomWordResult.ALREADY_ENDS_IN_FORBIDDEN_MORA: f"「{word}」 ends in ん and can't be played.",
            CustomWordResult.FAILED: f"Could not add 「{word}」. Check the kana reading.",
        }
        await interaction.response.send_message(
            replies[result],
            ephemeral=result != CustomWordResult.OK
        )

    @shiritori.command(name="removeword", description="Remove a word from this channel's vocabulary")
    async def remove_word(self, interaction: discord.Interaction, word: str):
        result = await turn_engine.remove_custom_word(interaction.channel_id, word)
        if result == RemoveWordResult.NOT_FOUND:
            await interaction.response.send_message(f"「{word}」 is not a custom word here.", ephemeral=True)
            return
        await interaction.response.send_message(f"Removed 「{word}」.")

    @shiritori.command(name="help", description="Display game rules and other instructions")
    async def help(self, interaction: discord.Interaction):
        await interaction.response.send_message(HELP_TEXT, ephemeral=True)


async def setup(bot: commands.Bot):
    """Setup function for loading the cog."""
    await bot.add_cog(GameCommands(bot))
