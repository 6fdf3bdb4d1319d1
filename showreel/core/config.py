"""Configuration management for Showreel."""

from pydantic import NonNegativeFloat, PositiveFloat, PositiveInt, field_validator
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from urllib.parse import urlparse


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # TMDB
    tmdb_api_key: str
    image_base_url: str = "https://image.tmdb.org/t/p"
    still_size: str = "w185"  # w92 for compact lists

    # Embedded playback
    player_base_url: str = "https://apimocine.vercel.app"
    intro_seconds: NonNegativeFloat = 5.5  # 0 disables the intro overlay

    # Season episode cache
    episode_cache_size: PositiveInt = 100
    episode_cache_ttl: PositiveInt = 1800  # seconds

    # Best-effort commands to embedded frames
    frame_command_timeout: PositiveFloat = 2.0

    @field_validator("image_base_url", "player_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https"):
            raise ValueError("Base URL must use http or https")
        if not parsed.netloc:
            raise ValueError("Base URL must have a host")
        return v.rstrip("/")

    # App settings
    debug: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
