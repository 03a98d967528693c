"""Cogs module for the Shiritori Bot."""
from cogs.game_commands import GameCommands
from cogs.word_handler import WordHandler

__all__ = [
    "GameCommands",
    "WordHandler",
]
