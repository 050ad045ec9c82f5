"""Service holding the live game sessions served by the API.

Sessions are in-memory only. A finished or abandoned game is summarised into
the score history and dropped from memory when the client deletes it or when
the registry needs room for new games.
"""

import logging
import random
import uuid
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from backend.config import BackendSettings
from musiq.core.exceptions import NotFoundError, PersistenceError
from musiq.core.models import Artist, Difficulty, GamePhase, GameRecord, RoundResult, Song
from musiq.game.session import GameSession, utc_now
from musiq.services.catalog import SongCatalog
from musiq.services.history import HistoryStore
from musiq.utils.text import is_correct_guess

logger = logging.getLogger(__name__)


@dataclass
class ActiveGame:
    """A game session tracked by the registry."""

    game_id: str
    session: GameSession
    created_at: datetime
    recorded: bool = field(default=False)


class GameRegistry:
    """Creates, looks up and retires game sessions.

    Handles:
    - Starting games from the song catalog
    - Routing player operations to the right session
    - Saving the summary of finished and abandoned games
    """

    def __init__(
        self,
        settings: BackendSettings,
        catalog: SongCatalog,
        history: HistoryStore,
        clock: Callable[[], datetime] = utc_now,
        rng: random.Random | None = None,
    ):
        """Initialize the registry.

        Args:
            settings: Backend settings.
            catalog: Song source for new games.
            history: Where finished games are recorded.
            clock: Time source shared by all sessions.
            rng: Random source shared by all sessions.
        """
        self.settings = settings
        self.catalog = catalog
        self.history = history
        self._clock = clock
        self._rng = rng
        self._games: OrderedDict[str, ActiveGame] = OrderedDict()

    def __len__(self) -> int:
        return len(self._games)

    async def create_game(self, artist: Artist, difficulty: Difficulty | None = None) -> ActiveGame:
        """Load songs and start a new game.

        Raises:
            CatalogError: If no songs could be loaded for the artist.
        """
        difficulty = difficulty or self.settings.default_difficulty
        session = GameSession(
            difficulty=difficulty,
            artist=artist,
            strict=self.settings.strict_transitions,
            clock=self._clock,
            rng=self._rng,
        )
        songs = await self.catalog.fetch_songs(artist.id, difficulty)
        session.load_songs(songs)
        session.start_new_game()

        while len(self._games) >= self.settings.max_active_games:
            _, oldest = self._games.popitem(last=False)
            logger.info(f"Evicting game {oldest.game_id} to make room")
            self._record(oldest)

        game = ActiveGame(game_id=str(uuid.uuid4()), session=session, created_at=self._clock())
        self._games[game.game_id] = game
        logger.info(f"Started game {game.game_id} for artist {artist.id} ({difficulty})")
        return game

    def get(self, game_id: str) -> ActiveGame:
        """Get a game by id.

        Raises:
            NotFoundError: If the game does not exist.
        """
        game = self._games.get(game_id)
        if game is None:
            raise NotFoundError(f"Game {game_id} not found")
        return game

    def find_song(self, game_id: str, song_id: str) -> Song | None:
        """Find a song in a game's candidates (for picked guesses)."""
        for song in self.get(game_id).session.songs:
            if song.id == song_id:
                return song
        return None

    def submit_guess(self, game_id: str, guess_text: str, song_id: str | None = None) -> RoundResult | None:
        game = self.get(game_id)
        session = game.session
        matched = self.find_song(game_id, song_id) if song_id else None

        current = session.current_song
        is_correct = current is not None and is_correct_guess(current, guess_text, matched)
        return session.submit_guess(guess_text, is_correct, matched)

    def skip(self, game_id: str) -> RoundResult | None:
        return self.get(game_id).session.skip()

    def next_round(self, game_id: str) -> Song | None:
        game = self.get(game_id)
        song = game.session.advance_to_next_round()
        if game.session.phase == GamePhase.COMPLETE:
            self._record(game)
        return song

    def complete(self, game_id: str) -> GameRecord | None:
        game = self.get(game_id)
        game.session.complete_game()
        return self._record(game)

    def hide_feedback(self, game_id: str) -> None:
        self.get(game_id).session.hide_feedback()

    def abandon(self, game_id: str) -> GameRecord | None:
        """Drop a game, recording it if it got past setup."""
        game = self.get(game_id)
        del self._games[game_id]
        return self._record(game)

    def _record(self, game: ActiveGame) -> GameRecord | None:
        if game.recorded or game.session.phase == GamePhase.SETUP:
            return None

        record = game.session.summarize()
        game.recorded = True
        try:
            self.history.append(record)
        except PersistenceError as e:
            logger.error(f"Failed to save history for game {game.game_id}: {e}")
        return record
