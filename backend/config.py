"""Backend-specific configuration."""

from functools import lru_cache

from pydantic import Field

from musiq.core.config import Settings


class BackendSettings(Settings):
    """Extended settings for the backend API."""

    # In-memory game sessions
    max_active_games: int = Field(1000, ge=1)

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "https://www.heardle.fun",
    ]


@lru_cache
def get_backend_settings() -> BackendSettings:
    """Get cached backend settings instance."""
    return BackendSettings()
