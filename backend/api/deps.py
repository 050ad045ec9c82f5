"""Dependency injection for API routes."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from backend.config import BackendSettings, get_backend_settings
from backend.services.game_registry import GameRegistry
from musiq.services.catalog import HeardleCatalogClient
from musiq.services.history import HistoryStore, JsonHistoryStore


async def get_settings() -> BackendSettings:
    """Get application settings."""
    return get_backend_settings()


@lru_cache
def get_history_store() -> HistoryStore:
    """Get the shared score history store."""
    return JsonHistoryStore(get_backend_settings().history_path)


@lru_cache
def get_game_registry() -> GameRegistry:
    """Get the process-wide game registry."""
    settings = get_backend_settings()
    return GameRegistry(
        settings=settings,
        catalog=HeardleCatalogClient(settings),
        history=get_history_store(),
    )


async def get_registry() -> GameRegistry:
    return get_game_registry()


async def get_history() -> HistoryStore:
    return get_history_store()


# Type aliases for cleaner route signatures
Settings = Annotated[BackendSettings, Depends(get_settings)]
GameRegistryDep = Annotated[GameRegistry, Depends(get_registry)]
HistoryStoreDep = Annotated[HistoryStore, Depends(get_history)]
