"""Drives a GameSession with the catalog, audio player and history store.

The session is synchronous and pure; everything that waits on the outside
world lives here and is awaited one call at a time.
"""

import logging
import random
from collections.abc import Callable
from datetime import datetime

from musiq.core.config import Settings, get_settings
from musiq.core.exceptions import (
    CatalogError,
    InvalidTransitionError,
    PersistenceError,
    PlaybackError,
)
from musiq.core.models import Artist, Difficulty, GamePhase, GameRecord, RoundResult, Song
from musiq.game.session import GameSession, utc_now
from musiq.services.audio import AudioPlayer
from musiq.services.catalog import SongCatalog
from musiq.services.history import HistoryStore
from musiq.utils.text import is_correct_guess

logger = logging.getLogger(__name__)


class GameController:
    """Runs one game at a time against an artist's catalog.

    Handles:
    - Loading songs and starting the session
    - Playing (and replaying) the preview clip for the current attempt
    - Judging typed or picked guesses
    - Saving a history record when the game ends or is abandoned
    """

    def __init__(
        self,
        catalog: SongCatalog,
        player: AudioPlayer,
        history: HistoryStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
        rng: random.Random | None = None,
    ):
        self.catalog = catalog
        self.player = player
        self.history = history
        self.settings = settings or get_settings()
        self._clock = clock
        self._rng = rng
        self.session: GameSession | None = None
        self._recorded = False

    @property
    def songs(self) -> list[Song]:
        """Songs eligible in the current session (for guess pickers)."""
        return list(self.session.songs) if self.session else []

    async def start_game(self, artist: Artist, difficulty: Difficulty | None = None) -> GameSession:
        """Load the artist's songs and start the first round.

        Raises:
            CatalogError: If no songs could be loaded. ``self.session`` is
                left in SETUP so the caller can retry.
        """
        difficulty = difficulty or self.settings.default_difficulty
        self.session = GameSession(
            difficulty=difficulty,
            artist=artist,
            strict=self.settings.strict_transitions,
            clock=self._clock,
            rng=self._rng,
        )
        self._recorded = False

        try:
            songs = await self.catalog.fetch_songs(artist.id, difficulty)
            self.session.load_songs(songs)
            self.session.start_new_game()
        except CatalogError as e:
            logger.warning(f"Could not start game for {artist.name}: {e}")
            raise

        await self.play_clip()
        return self.session

    async def play_clip(self) -> bool:
        """Play the current song for the current attempt's duration.

        Returns:
            False if there was nothing to play or playback failed. The round
            carries on either way.
        """
        session = self._require_session("play a clip")
        song = session.current_song
        if session.phase != GamePhase.PLAYING or song is None or not song.preview_url:
            return False

        try:
            await self.player.play(song.preview_url, session.current_play_duration)
        except PlaybackError as e:
            logger.warning(f"Audio playback error for song {song.id}: {e}")
            return False
        return True

    def submit_guess(self, guess_text: str, matched_song: Song | None = None) -> RoundResult | None:
        """Judge a guess against the current song and resolve the round.

        A picked catalog song is judged by id; free text by title.
        """
        session = self._require_session("submit a guess")
        current = session.current_song
        is_correct = current is not None and is_correct_guess(current, guess_text, matched_song)

        return session.submit_guess(guess_text, is_correct, matched_song)

    async def skip(self) -> RoundResult | None:
        """Skip: replay a longer clip, or give up on the final attempt."""
        session = self._require_session("skip")
        result = session.skip()
        if result is None and session.phase == GamePhase.PLAYING:
            await self.play_clip()
        return result

    async def next_round(self) -> Song | None:
        """Advance past feedback. Saves the game when no songs are left."""
        session = self._require_session("advance to the next round")
        song = session.advance_to_next_round()
        if song is not None:
            await self.play_clip()
        elif session.phase == GamePhase.COMPLETE:
            self.record()
        return song

    def finish(self) -> GameRecord | None:
        """End the game now and save it."""
        session = self._require_session("complete the game")
        session.complete_game()
        return self.record()

    def abandon(self) -> GameRecord | None:
        """Leave the game. Sessions that never left SETUP are not saved."""
        if self.session is None:
            return None
        return self.record()

    def record(self) -> GameRecord | None:
        """Save the session summary once. Storage failures are only logged."""
        session = self._require_session("record the game")
        if self._recorded or session.phase == GamePhase.SETUP:
            return None

        record = session.summarize()
        self._recorded = True
        try:
            self.history.append(record)
        except PersistenceError as e:
            logger.error(f"Failed to save game history: {e}")
        return record

    def _require_session(self, operation: str) -> GameSession:
        if self.session is None:
            raise InvalidTransitionError(operation, GamePhase.SETUP.value, "no game has been started")
        return self.session
