"""Score history routes."""

from fastapi import APIRouter, Query
from pydantic import BaseModel

from backend.api.deps import HistoryStoreDep
from musiq.core.models import GameRecord
from musiq.services.history import GameHistory

router = APIRouter()


# -----------------------------------------------------------------------------
# Response Models
# -----------------------------------------------------------------------------


class GameRecordResponse(BaseModel):
    """A saved game."""

    id: str
    artist_id: str | None
    artist_name: str | None
    artist_image_url: str | None
    difficulty: str
    score: int
    rank: str
    best_streak: int
    songs_completed: int
    correct_guesses: int
    accuracy: float
    is_perfect: bool
    completed: bool
    started_at: str
    duration_seconds: float
    average_guess_time_seconds: float


class HistoryResponse(BaseModel):
    """A list of saved games."""

    games: list[GameRecordResponse]
    total: int


class ScoreboardResponse(BaseModel):
    """Aggregate statistics over all saved games."""

    total_games_played: int
    highest_score: int
    average_score: float
    perfect_games: int
    best_streak: int
    average_accuracy: float
    most_played_artist: str | None
    favorite_rank: str
    top_scores: list[GameRecordResponse]
    top_streaks: list[GameRecordResponse]


def _record_response(record: GameRecord) -> GameRecordResponse:
    return GameRecordResponse(
        id=record.id,
        artist_id=record.artist_id,
        artist_name=record.artist_name,
        artist_image_url=record.artist_image_url,
        difficulty=record.difficulty,
        score=record.score,
        rank=record.rank.value,
        best_streak=record.best_streak,
        songs_completed=record.songs_completed,
        correct_guesses=record.correct_guesses,
        accuracy=record.accuracy,
        is_perfect=record.is_perfect,
        completed=record.completed,
        started_at=record.started_at.isoformat(),
        duration_seconds=record.duration_seconds,
        average_guess_time_seconds=record.average_guess_time_seconds,
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.get("", response_model=HistoryResponse)
async def list_games(
    history: HistoryStoreDep,
    limit: int = Query(20, ge=1, le=100, description="Number of games"),
    artist_id: str | None = Query(None, description="Only games for this artist"),
    perfect_only: bool = Query(False, description="Only perfect games"),
) -> HistoryResponse:
    """List saved games, newest first."""
    games = GameHistory.from_store(history)
    if perfect_only:
        records = games.perfect_games_history()
    elif artist_id:
        records = games.games_for_artist(artist_id)
    else:
        records = games.recent_games(games.total_games_played)

    return HistoryResponse(
        games=[_record_response(r) for r in records[:limit]],
        total=len(records),
    )


@router.get("/stats", response_model=ScoreboardResponse)
async def get_stats(
    history: HistoryStoreDep,
    limit: int = Query(10, ge=1, le=50, description="Entries per leaderboard"),
) -> ScoreboardResponse:
    """Get the scoreboard."""
    games = GameHistory.from_store(history)
    return ScoreboardResponse(
        total_games_played=games.total_games_played,
        highest_score=games.highest_score,
        average_score=games.average_score,
        perfect_games=games.perfect_games,
        best_streak=games.best_streak,
        average_accuracy=games.average_accuracy,
        most_played_artist=games.most_played_artist,
        favorite_rank=games.favorite_rank.value,
        top_scores=[_record_response(r) for r in games.top_scores(limit)],
        top_streaks=[_record_response(r) for r in games.top_streaks(limit)],
    )
