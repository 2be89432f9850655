"""
Configuration management for the CarMatch engine.
Uses pydantic-settings for environment variable handling.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    # API Configuration
    api_title: str = "CarMatch API"
    api_version: str = "1.0.0"
    debug: bool = False

    # Fallback chain defaults (used by FallbackConfig.from_settings)
    fallback_max_results: int = 5
    fallback_price_tolerance_percent: float = 20.0
    fallback_max_year_distance: int = 5

    # Exact search "similar model" suggestions
    suggestion_price_tolerance_percent: float = 30.0
    suggestion_year_window: int = 3

    # Typo-tolerant brand/model matching (rapidfuzz 0-100 scale)
    fuzzy_match_threshold: float = 60.0


# Global settings instance
settings = Settings()
