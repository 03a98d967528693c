"""Services module for the Shiritori Bot."""
from services.lexicon import Lexicon
from services.player_ledger import PlayerLedger
from services.session_ledger import SessionLedger
from services.turn_engine import TurnEngine

__all__ = [
    "Lexicon",
    "PlayerLedger",
    "SessionLedger",
    "TurnEngine",
]
