"""Game routes: start a game and play it round by round.

Every mutating route returns the full game state so clients can render
from a single response.
"""

from typing import Literal

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from backend.api.deps import GameRegistryDep
from backend.services.game_registry import ActiveGame
from musiq.core.exceptions import CatalogError, InvalidTransitionError, NotFoundError
from musiq.core.models import Artist, GamePhase, GameRecord, RoundResult

router = APIRouter()


# -----------------------------------------------------------------------------
# Request/Response Models
# -----------------------------------------------------------------------------


class StartGameRequest(BaseModel):
    """Request to start a game."""

    artist_id: str = Field(..., min_length=1, description="Catalog artist or playlist id")
    artist_name: str | None = Field(None, description="Display name for history")
    artist_image_url: str | None = None
    difficulty: Literal["easy", "medium", "hard"] | None = Field(
        None,
        description="Difficulty tier (server default when omitted)",
    )


class GuessRequest(BaseModel):
    """A guess typed or picked by the player."""

    guess: str = Field("", description="Guess text")
    song_id: str | None = Field(None, description="Catalog song picked from the choices")


class ClipResponse(BaseModel):
    """What the player may know about the song being played."""

    preview_url: str | None
    play_duration: int
    next_play_duration: int | None


class RoundResultResponse(BaseModel):
    """Outcome of the last finished round."""

    song_id: str
    song_name: str
    artist_name: str
    album_name: str
    artwork_url: str | None
    is_correct: bool
    was_skipped: bool
    attempts_used: int
    guess_latency_seconds: float
    points_earned: int
    bonus_points: int
    speed_bonus: bool
    guessed_label: str | None


class GameStateResponse(BaseModel):
    """Current state of a game."""

    game_id: str
    phase: str
    artist_id: str | None
    artist_name: str | None
    difficulty: str
    score: int
    streak: int
    best_streak: int
    songs_completed: int
    correct_guesses: int
    total_guesses: int
    attempts_used: int
    perfect_game: bool
    is_perfect: bool
    accuracy: float
    average_guess_time_seconds: float
    rank: str
    songs_remaining: int
    feedback_visible: bool
    clip: ClipResponse | None
    last_result: RoundResultResponse | None


class SongChoice(BaseModel):
    """A song the player can pick as a guess."""

    id: str
    name: str
    album_name: str


class SongChoicesResponse(BaseModel):
    """Songs to choose from when guessing."""

    songs: list[SongChoice]


class GameSummaryResponse(BaseModel):
    """Summary saved for an ended game."""

    id: str
    score: int
    rank: str
    accuracy: float
    best_streak: int
    songs_completed: int
    is_perfect: bool
    completed: bool
    duration_seconds: float


def _round_result_response(result: RoundResult) -> RoundResultResponse:
    song = result.song
    return RoundResultResponse(
        song_id=song.id,
        song_name=song.name,
        artist_name=song.artist_name,
        album_name=song.album_name,
        artwork_url=song.artwork_image_url(),
        is_correct=result.is_correct,
        was_skipped=result.was_skipped,
        attempts_used=result.attempts_used,
        guess_latency_seconds=result.guess_latency_seconds,
        points_earned=result.points_earned,
        bonus_points=result.bonus_points,
        speed_bonus=result.speed_bonus,
        guessed_label=result.guessed_label,
    )


def _game_state_response(game: ActiveGame) -> GameStateResponse:
    session = game.session
    clip = None
    if session.phase == GamePhase.PLAYING and session.current_song is not None:
        clip = ClipResponse(
            preview_url=session.current_song.preview_url,
            play_duration=session.current_play_duration,
            next_play_duration=session.next_play_duration,
        )

    last_result = session.last_result
    return GameStateResponse(
        game_id=game.game_id,
        phase=session.phase.value,
        artist_id=session.artist.id if session.artist else None,
        artist_name=session.artist.name if session.artist else None,
        difficulty=session.difficulty,
        score=session.score,
        streak=session.streak,
        best_streak=session.best_streak,
        songs_completed=session.songs_completed,
        correct_guesses=session.correct_guesses,
        total_guesses=session.total_guesses,
        attempts_used=session.attempts_used,
        perfect_game=session.perfect_game,
        is_perfect=session.is_perfect,
        accuracy=session.accuracy,
        average_guess_time_seconds=session.average_guess_time_seconds,
        rank=session.rank.value,
        songs_remaining=len(session.unplayed_songs),
        feedback_visible=session.feedback_visible,
        clip=clip,
        last_result=_round_result_response(last_result) if last_result else None,
    )


def _summary_response(record: GameRecord) -> GameSummaryResponse:
    return GameSummaryResponse(
        id=record.id,
        score=record.score,
        rank=record.rank.value,
        accuracy=record.accuracy,
        best_streak=record.best_streak,
        songs_completed=record.songs_completed,
        is_perfect=record.is_perfect,
        completed=record.completed,
        duration_seconds=record.duration_seconds,
    )


def _get_game(registry: GameRegistryDep, game_id: str) -> ActiveGame:
    try:
        return registry.get(game_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Game not found",
        )


def _conflict(error: InvalidTransitionError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))


# -----------------------------------------------------------------------------
# Start / Inspect
# -----------------------------------------------------------------------------


@router.post("", response_model=GameStateResponse, status_code=status.HTTP_201_CREATED)
async def start_game(request: StartGameRequest, registry: GameRegistryDep) -> GameStateResponse:
    """Start a new game against an artist's songs.

    Loads the artist's catalog for the difficulty tier and starts the first
    round. Returns 502 when no songs could be loaded.
    """
    artist = Artist(
        id=request.artist_id,
        name=request.artist_name or request.artist_id,
        image_url=request.artist_image_url,
    )
    try:
        game = await registry.create_game(artist, request.difficulty)
    except CatalogError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not start game: {e}",
        )

    return _game_state_response(game)


@router.get("/{game_id}", response_model=GameStateResponse)
async def get_game(game_id: str, registry: GameRegistryDep) -> GameStateResponse:
    """Get the current state of a game."""
    return _game_state_response(_get_game(registry, game_id))


@router.get("/{game_id}/choices", response_model=SongChoicesResponse)
async def get_choices(game_id: str, registry: GameRegistryDep) -> SongChoicesResponse:
    """List the songs the player can pick from when guessing."""
    game = _get_game(registry, game_id)
    songs = sorted(game.session.songs, key=lambda s: s.name.lower())
    return SongChoicesResponse(
        songs=[SongChoice(id=song.id, name=song.name, album_name=song.album_name) for song in songs]
    )


# -----------------------------------------------------------------------------
# Round Actions
# -----------------------------------------------------------------------------


@router.post("/{game_id}/guess", response_model=GameStateResponse)
async def submit_guess(game_id: str, request: GuessRequest, registry: GameRegistryDep) -> GameStateResponse:
    """Submit a guess for the current round.

    A picked ``song_id`` is judged by id; otherwise the text is compared to
    the song title.
    """
    game = _get_game(registry, game_id)
    if request.song_id and registry.find_song(game_id, request.song_id) is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Song is not part of this game",
        )

    try:
        registry.submit_guess(game_id, request.guess, request.song_id)
    except InvalidTransitionError as e:
        raise _conflict(e)

    return _game_state_response(game)


@router.post("/{game_id}/skip", response_model=GameStateResponse)
async def skip(game_id: str, registry: GameRegistryDep) -> GameStateResponse:
    """Hear a longer clip, or give up on the final attempt."""
    game = _get_game(registry, game_id)
    try:
        registry.skip(game_id)
    except InvalidTransitionError as e:
        raise _conflict(e)

    return _game_state_response(game)


@router.post("/{game_id}/next", response_model=GameStateResponse)
async def next_round(game_id: str, registry: GameRegistryDep) -> GameStateResponse:
    """Move to the next song, or complete the game when none are left."""
    game = _get_game(registry, game_id)
    try:
        registry.next_round(game_id)
    except InvalidTransitionError as e:
        raise _conflict(e)

    return _game_state_response(game)


@router.post("/{game_id}/hide-feedback", response_model=GameStateResponse)
async def hide_feedback(game_id: str, registry: GameRegistryDep) -> GameStateResponse:
    """Dismiss the round feedback."""
    game = _get_game(registry, game_id)
    registry.hide_feedback(game_id)
    return _game_state_response(game)


# -----------------------------------------------------------------------------
# End
# -----------------------------------------------------------------------------


@router.post("/{game_id}/complete", response_model=GameStateResponse)
async def complete_game(game_id: str, registry: GameRegistryDep) -> GameStateResponse:
    """End the game now and save it to the history."""
    game = _get_game(registry, game_id)
    registry.complete(game_id)
    return _game_state_response(game)


@router.delete("/{game_id}", response_model=GameSummaryResponse | None)
async def abandon_game(game_id: str, registry: GameRegistryDep) -> GameSummaryResponse | None:
    """Leave a game.

    Games that got past setup are saved (as abandoned unless already
    complete). Returns the summary saved by this call, or null when the
    game never left setup or was already saved when it completed.
    """
    _get_game(registry, game_id)
    record = registry.abandon(game_id)
    return _summary_response(record) if record else None
