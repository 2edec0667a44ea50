"""
Configuration management for chat_context.

Uses pydantic-settings for type-safe configuration with automatic
environment variable loading and validation.

Settings only provide defaults for the convenience wrappers
(``MentionResolver.from_settings``, ``ContextComposer.from_settings``);
the core functions always take their configuration as explicit arguments.
"""

import re
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chat_context import constants


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field can be overridden with a ``CHAT_CONTEXT_`` prefixed
    variable, e.g. ``CHAT_CONTEXT_MAX_SUGGESTIONS=3``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHAT_CONTEXT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # Mention resolution
    mention_sigil: str = Field(
        default=constants.MENTION_SIGIL,
        description="Character that opens an explicit mention",
    )
    max_suggestions: int = Field(
        default=constants.DEFAULT_MAX_SUGGESTIONS,
        description="Maximum fuzzy suggestions per unresolved mention",
    )

    # Passive detection
    min_word_length: int = Field(
        default=constants.DEFAULT_MIN_WORD_LENGTH,
        description="Names/aliases shorter than this are never auto-detected",
    )
    max_auto_detected: int = Field(
        default=constants.DEFAULT_MAX_AUTO_DETECTED,
        description="Maximum number of auto-detected entities",
    )

    # Context composition
    response_buffer: int = Field(
        default=constants.DEFAULT_RESPONSE_BUFFER,
        description="Tokens reserved for the model's reply",
    )
    section_separator: str = Field(
        default=constants.DEFAULT_SECTION_SEPARATOR,
        description="Separator placed between composed sections",
    )
    chars_per_token: float = Field(
        default=constants.DEFAULT_CHARS_PER_TOKEN,
        description="Character-per-token ratio used to estimate token cost",
    )

    @field_validator("max_suggestions", "min_word_length", "max_auto_detected")
    @classmethod
    def positive_count(cls, v: int) -> int:
        """Reject zero or negative counts."""
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("response_buffer")
    @classmethod
    def non_negative_buffer(cls, v: int) -> int:
        """Reject negative response buffers."""
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @field_validator("chars_per_token")
    @classmethod
    def positive_ratio(cls, v: float) -> float:
        """Reject non-positive character ratios."""
        if v <= 0:
            raise ValueError("must be greater than 0")
        return v

    @field_validator("mention_sigil")
    @classmethod
    def single_symbol(cls, v: str) -> str:
        """A sigil is exactly one non-word, non-space character."""
        if len(v) != 1 or re.match(r"[\w\s]", v):
            raise ValueError("must be a single non-word, non-space character")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
