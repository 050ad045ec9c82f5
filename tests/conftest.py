"""Shared test fixtures for MusIQ."""

import random
from datetime import UTC, datetime, timedelta

import pytest

from musiq.core.config import Settings
from musiq.core.models import Artist, GameRecord, Song
from musiq.game.session import GameSession
from musiq.services.history import InMemoryHistoryStore
from tests.helpers import FakeClock, make_song


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def artist() -> Artist:
    return Artist(
        id="artist_queen",
        name="Queen",
        image_url="https://images.example.com/queen.jpg",
        genres=["Rock", "Glam Rock", "Arena Rock"],
    )


@pytest.fixture
def sample_songs() -> list[Song]:
    """Songs spread across the three difficulty tiers."""
    return [
        make_song("s1", "Bohemian Rhapsody", "easy", album_name="A Night at the Opera"),
        make_song("s2", "Don't Stop Me Now", "easy", album_name="Jazz"),
        make_song("s3", "Somebody to Love", "medium", album_name="A Day at the Races"),
        make_song("s4", "'39", "hard", album_name="A Night at the Opera"),
    ]


@pytest.fixture
def session(sample_songs: list[Song], artist: Artist, clock: FakeClock, rng: random.Random) -> GameSession:
    """A strict session on the hard tier (all sample songs eligible)."""
    return GameSession(sample_songs, difficulty="hard", artist=artist, clock=clock, rng=rng)


@pytest.fixture
def mock_settings(tmp_path) -> Settings:
    """Settings isolated from the environment and the user's home."""
    return Settings(
        environment="development",
        catalog_api_url="https://catalog.example.com/",
        history_path=tmp_path / "history.json",
    )


@pytest.fixture
def history_store() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()


@pytest.fixture
def sample_records() -> list[GameRecord]:
    """Saved games with varied scores, artists and dates."""
    base = datetime(2024, 3, 1, 18, 0, 0, tzinfo=UTC)
    return [
        GameRecord(
            artist_id="artist_queen",
            artist_name="Queen",
            score=45,
            best_streak=4,
            songs_completed=5,
            correct_guesses=5,
            total_guesses=5,
            accuracy=100.0,
            perfect_game=True,
            started_at=base,
            duration_seconds=95,
        ),
        GameRecord(
            artist_id="artist_abba",
            artist_name="ABBA",
            score=12,
            best_streak=2,
            songs_completed=4,
            correct_guesses=2,
            total_guesses=3,
            accuracy=200 / 3,
            perfect_game=False,
            started_at=base + timedelta(days=1),
            duration_seconds=130,
        ),
        GameRecord(
            artist_id="artist_queen",
            artist_name="Queen",
            score=90,
            best_streak=9,
            songs_completed=10,
            correct_guesses=9,
            total_guesses=10,
            accuracy=90.0,
            perfect_game=False,
            started_at=base + timedelta(days=2),
            duration_seconds=240,
        ),
    ]
