"""
Configuration settings for the Shiritori Discord Bot.
Loads environment variables and defines constants.
"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Discord Bot Token
    discord_token: Optional[str] = Field(default=None, validation_alias="DISCORD_TOKEN")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///torigemu.db",
        validation_alias="DATABASE_URL"
    )

    # Scoring
    loss_penalty: int = Field(default=5, validation_alias="LOSS_PENALTY")
    challenge_penalty: int = Field(default=0, validation_alias="CHALLENGE_PENALTY")
    custom_word_bonus: int = Field(default=1, validation_alias="CUSTOM_WORD_BONUS")

    # Turn policy
    require_turn_alternation: bool = Field(default=True, validation_alias="REQUIRE_TURN_ALTERNATION")
    # Alternation in one-on-one chats with the bot (a single player would never get a turn)
    private_turn_alternation: bool = Field(default=False, validation_alias="PRIVATE_TURN_ALTERNATION")
    require_reply: bool = Field(default=False, validation_alias="REQUIRE_REPLY")
    award_opening_before_validation: bool = Field(
        default=True,
        validation_alias="AWARD_OPENING_BEFORE_VALIDATION"
    )
    new_game_resets_scores: bool = Field(default=False, validation_alias="NEW_GAME_RESETS_SCORES")

    # Development mode
    dev_mode: bool = Field(default=False, validation_alias="DEV_MODE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance
SETTINGS = Settings()

# Reasons a word is refused by the lexicon
class InvalidReason:
    ENDS_IN_FORBIDDEN_MORA = "ends_in_forbidden_mora"
    NOT_FOUND = "not_found"

# Where a reading came from
class ReadingSource:
    STANDARD = "standard"
    CUSTOM = "custom"
    DERIVED = "derived"
    NONE = "none"

# Derived noun suffix ("nature/quality of") and its reading
DERIVED_SUFFIX = "性"
DERIVED_SUFFIX_KANA = "せい"

# Logger names
LOGGER_NAME_MAIN = "__main__"
LOGGER_NAME_GAME = "__game__"
LOGGER_NAME_DB = "__database__"
