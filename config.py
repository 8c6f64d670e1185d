"""
Configuration settings for quizmark.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

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
    # Scoring
    # ========================================
    text_similarity: Literal["keyword", "fuzzy"] = Field(
        default="keyword",
        description="Partial-credit strategy for text answers",
    )
    fuzzy_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Minimum edit-distance similarity counted by the fuzzy strategy",
    )
    points_precision: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places awarded points are rounded to",
    )

    # ========================================
    # Leaderboard & Storage
    # ========================================
    leaderboard_limit: int = Field(
        default=10,
        ge=1,
        description="Default number of leaderboard rows",
    )
    attempts_dir: Path = Field(
        default=Path.home() / ".quizmark" / "attempts",
        description="Directory of the JSON attempt store",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )

    def get_scoring_config(self) -> dict[str, object]:
        """Get scoring configuration as a dictionary."""
        return {
            "text_similarity": self.text_similarity,
            "fuzzy_threshold": self.fuzzy_threshold,
            "points_precision": self.points_precision,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
