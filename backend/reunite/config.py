# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Reunite — Application Configuration
All settings are loaded from environment variables with community-scale
defaults. Override via backend/.env or environment.

Matching weights can be overridden per field with the nested delimiter,
e.g. MATCH_WEIGHTS__CATEGORY=0.25. They must still sum to 1.0.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MatchingWeights(BaseModel):
    """Per-field weights for the match scorer. Read-only at match time."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    category: float = Field(0.20, ge=0.0)
    location: float = Field(0.15, ge=0.0)
    description: float = Field(0.10, ge=0.0)
    ai_description: float = Field(0.05, ge=0.0, alias="aiDescription")
    image_match: float = Field(0.05, ge=0.0, alias="imageMatch")
    color: float = Field(0.12, ge=0.0)
    brand: float = Field(0.12, ge=0.0)
    size: float = Field(0.03, ge=0.0)
    date_range: float = Field(0.18, ge=0.0, alias="dateRange")

    @model_validator(mode="after")
    def _check_total(self) -> "MatchingWeights":
        total = sum(self.model_dump().values())
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Matching weights must sum to 1.0, got {total:.4f}")
        return self


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Stores ──────────────────────────────────────────────────────────────
    store_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    store_key_prefix: str = "reunite:"

    # ─── Matching Engine ─────────────────────────────────────────────────────
    min_match_score: float = Field(0.6, ge=0.0, le=1.0)
    match_weights: MatchingWeights = Field(default_factory=MatchingWeights)

    # Per-field "recorded as matched" thresholds
    description_match_threshold: float = 0.3
    # AI descriptions are denser text, so the bar is higher
    ai_description_match_threshold: float = 0.4
    image_match_threshold: float = 0.7
    date_match_threshold: float = 0.5
    date_window_days: float = 7.0

    # Expected embedding dimensionality; None accepts any length
    embedding_dim: Optional[int] = Field(None, gt=0)

    # ─── Notifications ───────────────────────────────────────────────────────
    notification_transport: Literal["log", "outbox"] = "outbox"
    sender_name: str = "Lost & Found System"
    # Active reports older than this get a reminder on POST /items/reminders
    reminder_after_days: float = Field(7.0, gt=0.0)

    # ─── Logging ─────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ─── Server ──────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached singleton Settings instance."""
    return Settings()
