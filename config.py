"""
Configuration settings for quizcore.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="WARNING",
        description="Minimum loguru level for CLI output",
    )

    # ========================================
    # Localization
    # ========================================
    default_language: str = Field(
        default="en",
        description="Language used when none is requested",
    )
    supported_languages: list[str] = Field(
        default=["en", "sl", "hr"],
        description="Languages with parallel text fields (text, text_sl, text_hr)",
    )

    # ─── Authoring limits ───────────────────────────────────────────────────────
    choice_min_options: int = Field(
        default=2,
        description="Minimum options for single/multiple choice questions",
    )
    dropdown_max_fields: int = Field(
        default=10,
        description="Maximum dropdown fields in one template",
    )
    ordering_min_items: int = Field(
        default=2,
        description="Minimum items in an ordering question",
    )
    ordering_max_items: int = Field(
        default=10,
        description="Maximum items in an ordering question",
    )
    matching_max_left_items: int = Field(
        default=8,
        description="Maximum items in the left matching column",
    )
    matching_max_right_items: int = Field(
        default=10,
        description="Maximum items in the right matching column",
    )
    quiz_title_min_length: int = Field(
        default=2,
        description="Minimum characters in a quiz title",
    )

    # ─── Quiz-taking ────────────────────────────────────────────────────────────
    ordering_shuffle_max_attempts: int = Field(
        default=10,
        ge=1,
        description="Shuffle retries before falling back to a rotation",
    )

    # ─── Storage ────────────────────────────────────────────────────────────────
    quiz_data_dir: Path = Field(
        default=Path.home() / ".quizcore" / "quizzes",
        description="Directory for JSON quiz files",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
