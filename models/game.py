"""
Game value types for the Shiritori Bot.
Snapshots of ledger rows and the outcomes the turn engine reports.
"""
from dataclasses import dataclass
from typing import Optional

from config import InvalidReason, ReadingSource


@dataclass(frozen=True)
class PlayerProfile:
    """Identity and profile fields of a chat user, as the transport sees them."""
    user_id: int
    first_name: str = ""
    last_name: str = ""
    username: str = ""


@dataclass
class PlayerInfo:
    """Information about a player in a session."""
    session_id: int
    user_id: int
    first_name: str
    last_name: str
    username: str
    nickname: Optional[str] = None
    score: int = 0
    word_count: int = 0

    @classmethod
    def from_row(cls, row) -> "PlayerInfo":
        return cls(
            session_id=row.session_id,
            user_id=row.user_id,
            first_name=row.first_name,
            last_name=row.last_name,
            username=row.username,
            nickname=row.nickname,
            score=row.score,
            word_count=row.word_count,
        )

    @property
    def display_name(self) -> str:
        if self.nickname:
            return self.nickname
        full_name = f"{self.first_name} {self.last_name}".strip()
        if full_name:
            return full_name
        if self.username:
            return self.username
        return str(self.user_id)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "display_name": self.display_name,
            "nickname": self.nickname,
            "score": self.score,
            "word_count": self.word_count,
        }


@dataclass
class WordEntry:
    """One accepted word in a session's chain."""
    session_id: int
    user_id: int
    word: str
    points: int
    sequence: int
    kana: str = ""

    @classmethod
    def from_row(cls, row) -> "WordEntry":
        return cls(
            session_id=row.session_id,
            user_id=row.user_id,
            word=row.word,
            points=row.points,
            sequence=row.sequence,
            kana=row.kana,
        )


@dataclass(frozen=True)
class WordReading:
    """Readings and point value of a word, resolved from the lexicon."""
    word: str
    kana: str = ""
    points: int = 0
    source: str = ReadingSource.NONE

    @property
    def is_valid(self) -> bool:
        return self.points > 0


@dataclass(frozen=True)
class OpeningAward:
    """Points given retroactively to the first word of a chain."""
    word: str
    user_id: int
    points: int


# Submission outcomes

@dataclass(frozen=True)
class Outcome:
    """Base class of everything `TurnEngine.submit` can return."""

    @property
    def accepted(self) -> bool:
        return False


@dataclass(frozen=True)
class Accepted(Outcome):
    word: str
    points: int
    is_first_word: bool
    opening_award: Optional[OpeningAward] = None

    @property
    def accepted(self) -> bool:
        return True


@dataclass(frozen=True)
class RejectedWaitTurn(Outcome):
    last_word: str


@dataclass(frozen=True)
class RejectedNotResponding(Outcome):
    last_word: str


@dataclass(frozen=True)
class RejectedDuplicate(Outcome):
    word: str
    penalty_applied: int
    opening_award: Optional[OpeningAward] = None


@dataclass(frozen=True)
class RejectedInvalid(Outcome):
    word: str
    reason: str = InvalidReason.NOT_FOUND
    penalty_applied: int = 0
    opening_award: Optional[OpeningAward] = None


@dataclass(frozen=True)
class RejectedChainMismatch(Outcome):
    word: str
    kana: str
    last_word: str
    last_kana: str
    opening_award: Optional[OpeningAward] = None


@dataclass(frozen=True)
class ChallengeResult:
    """A retracted entry and what it cost its author."""
    removed: WordEntry
    points_reversed: int
    penalty_applied: int


class NicknameResult:
    OK = "ok"
    NAME_TAKEN = "name_taken"
    NO_CHANGE = "no_change"


class CustomWordResult:
    OK = "ok"
    ALREADY_ENDS_IN_FORBIDDEN_MORA = "already_ends_in_forbidden_mora"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


class RemoveWordResult:
    OK = "ok"
    NOT_FOUND = "not_found"
