"""Shared test fixtures for backend tests."""

import random
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backend.config import BackendSettings
from backend.services.game_registry import GameRegistry
from musiq.core.models import Song
from musiq.services.catalog import InMemorySongCatalog
from musiq.services.history import InMemoryHistoryStore
from tests.helpers import FakeClock, make_song


@pytest.fixture
def mock_backend_settings(tmp_path: Path) -> BackendSettings:
    """Create mock backend settings for testing."""
    return BackendSettings(
        environment="development",
        history_path=tmp_path / "history.json",
        max_active_games=10,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def catalog_songs() -> list[Song]:
    return [
        make_song("s1", "Bohemian Rhapsody", "easy", album_name="A Night at the Opera"),
        make_song("s2", "Don't Stop Me Now", "easy", album_name="Jazz"),
        make_song("s3", "Somebody to Love", "medium"),
    ]


@pytest.fixture
def history_store() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()


@pytest.fixture
def registry(
    mock_backend_settings: BackendSettings,
    catalog_songs: list[Song],
    history_store: InMemoryHistoryStore,
    clock: FakeClock,
) -> GameRegistry:
    """Registry backed by an in-memory catalog and history."""
    return GameRegistry(
        settings=mock_backend_settings,
        catalog=InMemorySongCatalog(catalog_songs),
        history=history_store,
        clock=clock,
        rng=random.Random(3),
    )


@pytest.fixture
def client(
    mock_backend_settings: BackendSettings,
    registry: GameRegistry,
    history_store: InMemoryHistoryStore,
) -> Generator[TestClient, None, None]:
    """Create test client with in-memory game services."""
    from backend.api import deps
    from backend.main import app

    async def get_settings_override() -> BackendSettings:
        return mock_backend_settings

    async def get_registry_override() -> GameRegistry:
        return registry

    async def get_history_override() -> InMemoryHistoryStore:
        return history_store

    app.dependency_overrides[deps.get_settings] = get_settings_override
    app.dependency_overrides[deps.get_registry] = get_registry_override
    app.dependency_overrides[deps.get_history] = get_history_override

    yield TestClient(app)

    app.dependency_overrides.clear()
