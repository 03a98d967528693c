"""Database models and game types for the Shiritori Bot - __init__ module."""
from models.db_models import (
    Base,
    Player,
    UsedWord,
    CustomWord,
    ReferenceWord,
    KanjiPoints,
)
from models.game import (
    PlayerProfile,
    PlayerInfo,
    WordEntry,
    WordReading,
    OpeningAward,
    Outcome,
    Accepted,
    RejectedWaitTurn,
    RejectedNotResponding,
    RejectedDuplicate,
    RejectedInvalid,
    RejectedChainMismatch,
    ChallengeResult,
    NicknameResult,
    CustomWordResult,
    RemoveWordResult,
)

__all__ = [
    "Base",
    "Player",
    "UsedWord",
    "CustomWord",
    "ReferenceWord",
    "KanjiPoints",
    "PlayerProfile",
    "PlayerInfo",
    "WordEntry",
    "WordReading",
    "OpeningAward",
    "Outcome",
    "Accepted",
    "RejectedWaitTurn",
    "RejectedNotResponding",
    "RejectedDuplicate",
    "RejectedInvalid",
    "RejectedChainMismatch",
    "ChallengeResult",
    "NicknameResult",
    "CustomWordResult",
    "RemoveWordResult",
]
