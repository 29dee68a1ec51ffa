"""Configuration management for the matchup parser."""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Team resolver calibration (empirically chosen, keep overridable)
    resolver_min_confidence: float = 0.8
    resolver_min_fuzzy_gap: float = 0.2
    resolver_contains_score: float = 0.97
    resolver_min_contains_length: int = 3
    resolver_require_anchor: bool = True

    # Spread extraction
    spread_min_magnitude: float = 0.5
    spread_max_magnitude: float = 50.0  # Anything larger is a year, score or odds

    # Venue extraction
    venue_proximity_window: int = 30  # Characters after a pick alias

    # Odds the caller should fall back to when none are parsed
    default_american_odds: int = -110

    # Logging
    log_level: str = "INFO"

    # Server Config
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
