"""Configuration via pydantic-settings (reads from .env or environment variables)."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root = two levels up from this file (src/suggestion_box/config.py)
_ROOT = Path(__file__).parent.parent.parent


class StoreConfig(BaseSettings):
    """Row-store location."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    data_dir: Path = Field(default=_ROOT / "data" / "store", alias="STORE_DATA_DIR")
    # False keeps every table in memory only (tests, demos)
    persist: bool = Field(default=True, alias="STORE_PERSIST")


class InsightsConfig(BaseSettings):
    """Keyword sentiment / insight parameters."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    top_k: int = Field(default=8, alias="INSIGHTS_TOP_K")
    # "substring" keeps the historical behaviour ("goodbye" counts as "good")
    match_mode: Literal["substring", "word"] = Field(
        default="substring", alias="INSIGHTS_MATCH_MODE"
    )
    positive_share: float = 0.7
    engagement_threshold: int = 10
    positive_words: list[str] = Field(
        default=[
            "good",
            "great",
            "excellent",
            "amazing",
            "love",
            "like",
            "awesome",
            "fantastic",
            "perfect",
            "wonderful",
        ]
    )
    negative_words: list[str] = Field(
        default=[
            "bad",
            "terrible",
            "awful",
            "hate",
            "dislike",
            "poor",
            "disappointing",
            "worst",
            "horrible",
            "useless",
        ]
    )


class LimitsConfig(BaseSettings):
    """Per-session submission caps."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        env_prefix="LIMITS_",
    )

    max_suggestions: int = 2
    max_feedback: int = 1


class AppConfig(BaseSettings):
    """Web app / dashboard settings."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    public_url: str = Field(default="http://localhost:8000", alias="APP_PUBLIC_URL")
    reports_dir: Path = Field(default=_ROOT / "data" / "reports", alias="APP_REPORTS_DIR")
    session_cookie: str = "suggestion_box_session"
    dashboard_refresh_seconds: int = Field(default=5, alias="APP_DASHBOARD_REFRESH")

    @property
    def submit_url(self) -> str:
        return f"{self.public_url.rstrip('/')}/submit"


# Singleton instances (import these in application code)
store_config = StoreConfig()
insights_config = InsightsConfig()
limits_config = LimitsConfig()
app_config = AppConfig()
