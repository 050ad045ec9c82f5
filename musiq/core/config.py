"""Configuration management for MusIQ."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    # Song catalog (the web app's mobile API)
    catalog_api_url: str = "https://www.heardle.fun"
    http_timeout_seconds: float = 30.0

    # Audio previews
    audio_load_timeout_seconds: float = 10.0

    # Local score history
    history_path: Path = Path.home() / ".musiq" / "history.json"

    # Gameplay
    default_difficulty: Literal["easy", "medium", "hard"] = "medium"
    strict_transitions: bool = True  # Raise on out-of-phase calls instead of ignoring them

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
