"""
Shiritori Discord Bot - Main Entry Point

A Discord bot for playing しりとり (Japanese word chain) in any channel.
Features:
- Kana chain matching with combined sounds and long-vowel marks
- Dictionary lookups with per-channel custom words
- Persistent scores, nicknames and word history per channel
- Self-challenge to take back the last word
"""
import asyncio
import logging
import sys
from pathlib import Path

import discord
from discord.ext import commands

from config import SETTINGS, LOGGER_NAME_MAIN, LOGGER_NAME_GAME, LOGGER_NAME_DB
from database import init_database, close_database
from services.turn_engine import turn_engine

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE = Path("logs") / "shiritori.log"

COGS = (
    "cogs.game_commands",
    "cogs.word_handler",
)


def setup_logging() -> logging.Logger:
    """
    Send the bot's own loggers to stdout and to LOG_FILE.

    The console follows DEV_MODE; the file always keeps DEBUG records.
    discord.py only reports warnings, and only to the console.
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if SETTINGS.dev_mode else logging.INFO)

    LOG_FILE.parent.mkdir(exist_ok=True)
    logfile = logging.FileHandler(LOG_FILE, encoding="utf-8", mode="a")
    logfile.setLevel(logging.DEBUG)

    for handler in (console, logfile):
        handler.setFormatter(formatter)

    for name in (LOGGER_NAME_MAIN, LOGGER_NAME_GAME, LOGGER_NAME_DB):
        bot_logger = logging.getLogger(name)
        bot_logger.setLevel(logging.DEBUG)
        bot_logger.addHandler(console)
        bot_logger.addHandler(logfile)

    discord_logger = logging.getLogger("discord")
    discord_logger.setLevel(logging.WARNING)
    discord_logger.addHandler(console)

    return logging.getLogger(LOGGER_NAME_MAIN)


class ShiritoriBot(commands.Bot):
    """Discord client that hosts one shiritori game per channel."""

    def __init__(self):
        intents = discord.Intents.default()
        intents.message_content = True  # words arrive as plain messages

        # Everything else is a slash command; the prefix is never matched
        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
            activity=discord.Game(name="しりとり | /shiritori help"),
        )
        self.logger = logging.getLogger(LOGGER_NAME_MAIN)

    async def setup_hook(self):
        await init_database()

        for cog in COGS:
            await self.load_extension(cog)
            self.logger.info(f"Loaded cog: {cog}")

        try:
            synced = await self.tree.sync()
        except discord.HTTPException as e:
            self.logger.error(f"Slash command sync failed: {e}")
        else:
            self.logger.info(f"Synced {len(synced)} slash commands")

    async def on_ready(self):
        self.logger.info(
            f"Ready as {self.user} (ID: {self.user.id}) in {len(self.guilds)} guilds, "
            f"dev mode {'on' if SETTINGS.dev_mode else 'off'}"
        )

    async def on_guild_remove(self, guild: discord.Guild):
        """Channels of a guild that removed the bot start over if it comes back."""
        cleared = 0
        for channel in guild.text_channels:
            cleared += await turn_engine.new_game(channel.id)
        self.logger.info(f"Removed from guild {guild.id}: cleared {cleared} words")

    async def close(self):
        await close_database()
        await super().close()


async def main():
    logger = setup_logging()

    if not SETTINGS.discord_token:
        logger.error("DISCORD_TOKEN is not set, add it to the environment or .env")
        sys.exit(1)

    logger.info("Starting Shiritori Bot...")
    async with ShiritoriBot() as bot:
        await bot.start(SETTINGS.discord_token)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
