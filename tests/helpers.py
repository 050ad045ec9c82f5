"""Test helpers shared by unit and API tests."""

from datetime import UTC, datetime, timedelta
from typing import Any

from musiq.core.models import Song


class FakeClock:
    """Manually advanced clock for timing-dependent tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def make_song(song_id: str, name: str, difficulty: str = "easy", **kwargs: Any) -> Song:
    """Create a catalog song with sensible defaults."""
    kwargs.setdefault("artist_name", "Queen")
    kwargs.setdefault("preview_url", f"https://audio.example.com/{song_id}.m4a")
    return Song(id=song_id, name=name, difficulty=difficulty, **kwargs)
