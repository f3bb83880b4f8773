"""
Client configuration: loads from environment variables and .env.
Settings are passed explicitly to the objects that need them.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Environment ──
    environment: str = "development"

    # ── Backend API ──
    api_base_url: str = "http://localhost:4321"
    request_timeout_seconds: float = 10.0
    connect_timeout_seconds: float = 5.0

    # ── Swipe gesture ──
    swipe_indicator_threshold_px: float = 50.0
    swipe_commit_threshold_px: float = 100.0
    card_enter_delay_seconds: float = 0.3
    swipe_exit_delay_seconds: float = 0.5

    # ── Preferences ──
    default_metadata_weight: float = 0.5
    missing_reason_text: str = "No data available"

    # ── Monitoring ──
    log_level: str = "INFO"
    log_format: str = "json"  # json | console


@lru_cache()
def get_settings() -> Settings:
    return Settings()
