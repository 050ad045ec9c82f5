"""Core data models for MusIQ."""

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Difficulty = Literal["easy", "medium", "hard"]

DIFFICULTY_DESCRIPTIONS: dict[str, str] = {
    "easy": "Most popular songs - perfect for casual fans",
    "medium": "Includes popular songs plus some deeper cuts",
    "hard": "All songs - from hits to rare tracks",
}


class GamePhase(str, Enum):
    """Phase of a game session."""

    SETUP = "setup"
    PLAYING = "playing"
    FEEDBACK = "feedback"
    COMPLETE = "complete"


class GameRank(str, Enum):
    """Rank awarded for a final score."""

    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"
    LEGENDARY = "Legendary"

    @property
    def min_score(self) -> int:
        """Lowest score (inclusive) that earns this rank."""
        return _RANK_MIN_SCORES[self]

    @classmethod
    def for_score(cls, score: int) -> "GameRank":
        """Get the rank for a final score."""
        rank = cls.BRONZE
        for candidate in cls:
            if score >= candidate.min_score:
                rank = candidate
        return rank


_RANK_MIN_SCORES = {
    GameRank.BRONZE: 0,
    GameRank.SILVER: 21,
    GameRank.GOLD: 41,
    GameRank.PLATINUM: 61,
    GameRank.LEGENDARY: 81,
}


class Artist(BaseModel):
    """Artist (or curated playlist) a game can be played against."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    image_url: str | None = None
    genres: list[str] = Field(default_factory=list)
    is_playlist: bool = False

    @property
    def display_genres(self) -> str:
        """First two genres, comma separated."""
        return ", ".join(self.genres[:2])

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Artist":
        """Build an artist from the mobile API payload."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            image_url=data.get("imageUrl"),
            genres=data.get("genres") or [],
            is_playlist=bool(data.get("isPlaylist") or False),
        )


class Song(BaseModel):
    """Song from the catalog. Immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    id: str  # Apple Music catalog id
    name: str
    artist_name: str
    album_name: str = ""
    preview_url: str | None = None
    difficulty: Difficulty = "hard"

    # Optional metadata
    artwork_url: str | None = None
    duration_ms: int | None = None

    def artwork_image_url(self, size: int = 300) -> str | None:
        """Artwork URL with the size template filled in."""
        if self.artwork_url is None:
            return None
        return self.artwork_url.replace("{w}x{h}", f"{size}x{size}")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Song":
        """Build a song from the mobile API payload.

        The payload nests metadata under ``attributes`` the way Apple Music
        does; the first preview is used as the clip source.
        """
        attributes = data.get("attributes") or {}
        previews = attributes.get("previews") or []
        artwork = attributes.get("artwork") or {}
        return cls(
            id=str(data["id"]),
            name=attributes["name"],
            artist_name=attributes.get("artistName", ""),
            album_name=attributes.get("albumName", ""),
            preview_url=previews[0].get("url") if previews else None,
            difficulty=data.get("difficulty", "hard"),
            artwork_url=artwork.get("url"),
            duration_ms=attributes.get("durationInMillis"),
        )


class RoundResult(BaseModel):
    """Outcome of one finished round."""

    model_config = ConfigDict(frozen=True)

    song: Song
    is_correct: bool
    was_skipped: bool = False
    attempts_used: int = Field(ge=1, le=5)
    guess_latency_seconds: float = Field(ge=0)
    points_earned: int = 0  # Base points after the streak multiplier
    bonus_points: int = 0
    speed_bonus: bool = False
    guessed_label: str | None = None

    @property
    def total_points(self) -> int:
        return self.points_earned + self.bonus_points


class GameRecord(BaseModel):
    """Summary of one played session, as stored in the score history."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    artist_id: str | None = None
    artist_name: str | None = None
    artist_image_url: str | None = None
    difficulty: Difficulty = "medium"

    score: int = 0
    streak: int = 0
    best_streak: int = 0
    songs_completed: int = 0
    correct_guesses: int = 0
    total_guesses: int = 0
    accuracy: float = 0.0
    perfect_game: bool = True
    completed: bool = True  # False when the player left before the end

    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    duration_seconds: float = 0.0
    average_guess_time_seconds: float = 0.0

    rounds: list[RoundResult] = Field(default_factory=list)

    @property
    def rank(self) -> GameRank:
        return GameRank.for_score(self.score)

    @property
    def is_perfect(self) -> bool:
        """Perfect games need at least one correct guess."""
        return self.perfect_game and self.correct_guesses > 0

    @property
    def accuracy_percentage(self) -> str:
        return f"{self.accuracy:.0f}%"

    @property
    def duration_formatted(self) -> str:
        minutes, seconds = divmod(int(self.duration_seconds), 60)
        return f"{minutes}:{seconds:02d}"


_DIFFICULTY_TIERS: dict[str, frozenset[str]] = {
    "easy": frozenset({"easy"}),
    "medium": frozenset({"easy", "medium"}),
    "hard": frozenset({"easy", "medium", "hard"}),
}


def songs_for_difficulty(songs: Sequence[Song], difficulty: Difficulty) -> list[Song]:
    """Filter songs to those eligible for a difficulty.

    Easy keeps easy songs, medium keeps easy and medium, hard keeps all.
    """
    tiers = _DIFFICULTY_TIERS[difficulty]
    return [song for song in songs if song.difficulty in tiers]
