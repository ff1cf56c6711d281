"""Rewriter settings with environment variable support.

Uses pydantic-settings for type-safe configuration management.
Automatically loads from .env file and validates all settings.
"""

import codecs
import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RewriterSettings(BaseSettings):
    """Rewriter configuration with automatic environment variable loading.

    Every field can be set through a ``FILE_REWRITER_``-prefixed environment
    variable. The .env file is loaded if present.

    Examples:
        >>> # FILE_REWRITER_FSYNC=false in the environment
        >>> RewriterSettings().fsync
        False

        >>> RewriterSettings(max_attempts=5).max_attempts
        5
    """

    model_config = SettingsConfigDict(
        env_prefix="FILE_REWRITER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    fsync: bool = Field(
        default=True,
        description="fsync the replacement before renaming it over the original",
    )
    skip_unchanged: bool = Field(
        default=True,
        description="Leave files untouched when the rewrite changes nothing",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per file when the temp file or rename fails",
    )
    encoding: str = Field(
        default="utf-8",
        description="Encoding used to turn CLI patterns into bytes",
    )
    log_level: str = Field(
        default="ERROR",
        description="Root log level for the CLI",
    )

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Validate the encoding is a known codec."""
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding '{v}'") from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize the log level name."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{v}'")
        return level

    @property
    def log_level_number(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level)
