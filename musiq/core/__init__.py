"""Core modules for MusIQ."""

from musiq.core.config import Settings, get_settings
from musiq.core.models import (
    Artist,
    GamePhase,
    GameRank,
    GameRecord,
    RoundResult,
    Song,
)

__all__ = [
    "Settings",
    "get_settings",
    "Artist",
    "Song",
    "GamePhase",
    "GameRank",
    "RoundResult",
    "GameRecord",
]
