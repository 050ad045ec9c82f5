"""Game session state machine.

One ``GameSession`` owns one playthrough against one artist's song pool:

    SETUP --start_new_game / start_new_round--> PLAYING
    PLAYING --extend_clip--> PLAYING            (attempts 0..3)
    PLAYING --submit_guess / give_up--> FEEDBACK (one RoundResult appended)
    FEEDBACK --advance_to_next_round--> PLAYING  (unplayed song left)
    FEEDBACK --advance_to_next_round--> COMPLETE (nothing left)
    any --complete_game--> COMPLETE

``skip`` is the player-facing button: it extends the clip while a longer one
exists and gives up on the final attempt.

The session does no I/O. Audio, catalog fetches and history persistence are
driven by ``GameController``.
"""

import logging
import random
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from musiq.core.exceptions import CatalogError, InvalidTransitionError
from musiq.core.models import (
    Artist,
    Difficulty,
    GamePhase,
    GameRank,
    GameRecord,
    RoundResult,
    Song,
    songs_for_difficulty,
)
from musiq.game import scoring

logger = logging.getLogger(__name__)

FINAL_ATTEMPT = scoring.MAX_PLAY_SECONDS - 1


def utc_now() -> datetime:
    return datetime.now(UTC)


class GameSession:
    """Mutable state of a single playthrough.

    Args:
        songs: Candidate songs; filtered to ``difficulty`` on construction.
        difficulty: Difficulty tier for the session.
        artist: Artist the songs belong to (used for the history record).
        strict: Raise ``InvalidTransitionError`` on out-of-phase calls. When
            False such calls are logged and ignored.
        clock: Returns the current time. Must be timezone-aware.
        rng: Random source used to pick songs.
    """

    def __init__(
        self,
        songs: Sequence[Song] = (),
        difficulty: Difficulty = "medium",
        artist: Artist | None = None,
        *,
        strict: bool = True,
        clock: Callable[[], datetime] = utc_now,
        rng: random.Random | None = None,
    ):
        self.difficulty: Difficulty = difficulty
        self.artist = artist
        self.songs = songs_for_difficulty(songs, difficulty)
        self.strict = strict
        self._clock = clock
        self._rng = rng or random.Random()
        self._reset()

    def _reset(self) -> None:
        now = self._clock()
        self.phase = GamePhase.SETUP
        self.current_song: Song | None = None
        self.attempts_used = 0
        self.score = 0
        self.streak = 0
        self.best_streak = 0
        self.songs_completed = 0
        self.correct_guesses = 0
        self.total_guesses = 0
        self.perfect_game = True
        self.session_started_at = now
        self.round_started_at = now
        self.results: list[RoundResult] = []
        self.feedback_visible = False

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def current_play_duration(self) -> int:
        """Seconds of the clip for the current attempt (1..5)."""
        return self.attempts_used + 1

    @property
    def next_play_duration(self) -> int | None:
        """Clip length after one more skip, or None if skipping gives up."""
        next_duration = self.current_play_duration + 1
        return next_duration if next_duration <= scoring.MAX_PLAY_SECONDS else None

    @property
    def is_final_attempt(self) -> bool:
        return self.attempts_used >= FINAL_ATTEMPT

    @property
    def last_result(self) -> RoundResult | None:
        return self.results[-1] if self.results else None

    @property
    def unplayed_songs(self) -> list[Song]:
        """Candidates not yet used in this session, current song included."""
        played = {result.song.id for result in self.results}
        if self.current_song is not None:
            played.add(self.current_song.id)
        return [song for song in self.songs if song.id not in played]

    @property
    def elapsed_seconds(self) -> float:
        return max((self._clock() - self.session_started_at).total_seconds(), 0.0)

    @property
    def accuracy(self) -> float:
        return scoring.accuracy(self.correct_guesses, self.total_guesses)

    @property
    def average_guess_time_seconds(self) -> float:
        return scoring.average_guess_time(self.elapsed_seconds, self.songs_completed)

    @property
    def rank(self) -> GameRank:
        return scoring.rank_for_score(self.score)

    @property
    def is_perfect(self) -> bool:
        """Perfect games need at least one correct guess."""
        return self.perfect_game and self.correct_guesses > 0

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def load_songs(self, songs: Sequence[Song]) -> None:
        """Replace the candidate songs before the game starts."""
        if not self._require("load songs", GamePhase.SETUP):
            return
        self.songs = songs_for_difficulty(songs, self.difficulty)

    def start_new_game(self) -> Song | None:
        """Reset all counters and start the first round with a random song.

        Raises:
            CatalogError: If no song is eligible; the session stays in SETUP.
        """
        if not self._require("start a new game", GamePhase.SETUP):
            return None

        self._reset()
        if not self.songs:
            raise CatalogError(f"No {self.difficulty} songs available")

        song = self._rng.choice(self.songs)
        self._begin_round(song)
        return song

    def start_new_round(self, song: Song) -> None:
        """Start a round with a specific song."""
        if not self._require("start a new round", GamePhase.SETUP, GamePhase.FEEDBACK):
            return

        if self.phase == GamePhase.SETUP:
            self.session_started_at = self._clock()
        self._begin_round(song)

    def submit_guess(
        self,
        guess_text: str,
        is_correct: bool,
        matched_song: Song | None = None,
    ) -> RoundResult | None:
        """Resolve the round with a guess.

        Args:
            guess_text: What the player typed.
            is_correct: Whether the guess names the current song.
            matched_song: Catalog song the guess was resolved to, if any.

        Returns:
            The appended RoundResult, or None if the call was ignored.
        """
        song = self._live_song("submit a guess")
        if song is None:
            return None

        latency = self._round_latency()
        breakdown = scoring.calculate_score(
            attempts_used=self.attempts_used,
            guess_latency_seconds=latency,
            is_correct=is_correct,
            streak=self.streak,
        )

        if is_correct:
            self.streak += 1
            self.best_streak = max(self.best_streak, self.streak)
            self.score += breakdown.total
            self.correct_guesses += 1
        else:
            self.streak = 0
            self.perfect_game = False

        self.total_guesses += 1
        self.songs_completed += 1

        label = matched_song.name if matched_song is not None else (guess_text.strip() or None)
        result = RoundResult(
            song=song,
            is_correct=is_correct,
            was_skipped=False,
            attempts_used=self.attempts_used + 1,
            guess_latency_seconds=latency,
            points_earned=breakdown.base_points,
            bonus_points=breakdown.bonus_points,
            speed_bonus=breakdown.speed_bonus,
            guessed_label=label,
        )
        return self._finish_round(result)

    def skip(self) -> RoundResult | None:
        """Skip button: hear more of the clip, or give up on the last attempt.

        Returns:
            None when the clip was extended (replay it for
            ``current_play_duration`` seconds), or the give-up RoundResult.
        """
        if self._live_song("skip") is None:
            return None
        if self.is_final_attempt:
            return self.give_up()
        self.extend_clip()
        return None

    def extend_clip(self) -> int | None:
        """Use one attempt to unlock a longer clip.

        Returns:
            The new clip duration in seconds.
        """
        if self._live_song("extend the clip") is None:
            return None
        if self.is_final_attempt:
            self._reject("extend the clip", "already at the longest clip")
            return None

        self.attempts_used += 1
        self.perfect_game = False
        return self.current_play_duration

    def give_up(self) -> RoundResult | None:
        """End the round without credit after the final attempt."""
        song = self._live_song("give up")
        if song is None:
            return None
        if not self.is_final_attempt:
            self._reject("give up", f"only allowed on attempt {FINAL_ATTEMPT + 1}")
            return None

        self.streak = 0
        self.perfect_game = False
        self.songs_completed += 1

        result = RoundResult(
            song=song,
            is_correct=False,
            was_skipped=True,
            attempts_used=scoring.MAX_PLAY_SECONDS,
            guess_latency_seconds=self._round_latency(),
            points_earned=0,
            bonus_points=0,
            speed_bonus=False,
            guessed_label=None,
        )
        return self._finish_round(result)

    def advance_to_next_round(self) -> Song | None:
        """Move on from feedback to a random unplayed song.

        Returns:
            The new current song, or None when the session completed because
            no unplayed song is left.
        """
        if not self._require("advance to the next round", GamePhase.FEEDBACK):
            return None

        candidates = self.unplayed_songs
        if not candidates:
            self._complete()
            return None

        song = self._rng.choice(candidates)
        self._begin_round(song)
        return song

    def complete_game(self) -> None:
        """End the session now. An in-flight round is discarded."""
        if self.phase == GamePhase.COMPLETE:
            return
        if self.phase == GamePhase.PLAYING:
            logger.info("Completing game mid-round; current round is not recorded")
        self._complete()

    def hide_feedback(self) -> None:
        """Dismiss the round feedback. Does not change phase."""
        self.feedback_visible = False

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    def summarize(self, completed: bool | None = None) -> GameRecord:
        """Build the history record for this session.

        Args:
            completed: Whether the session ended normally. Defaults to
                whether the session reached COMPLETE.
        """
        if completed is None:
            completed = self.phase == GamePhase.COMPLETE

        return GameRecord(
            artist_id=self.artist.id if self.artist else None,
            artist_name=self.artist.name if self.artist else None,
            artist_image_url=self.artist.image_url if self.artist else None,
            difficulty=self.difficulty,
            score=self.score,
            streak=self.streak,
            best_streak=self.best_streak,
            songs_completed=self.songs_completed,
            correct_guesses=self.correct_guesses,
            total_guesses=self.total_guesses,
            accuracy=self.accuracy,
            perfect_game=self.perfect_game,
            completed=completed,
            started_at=self.session_started_at,
            duration_seconds=self.elapsed_seconds,
            average_guess_time_seconds=self.average_guess_time_seconds,
            rounds=list(self.results),
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _begin_round(self, song: Song) -> None:
        self.current_song = song
        self.attempts_used = 0
        self.round_started_at = self._clock()
        self.feedback_visible = False
        self.phase = GamePhase.PLAYING
        logger.debug(f"Round {self.songs_completed + 1} started with song {song.id}")

    def _finish_round(self, result: RoundResult) -> RoundResult:
        self.results.append(result)
        self.phase = GamePhase.FEEDBACK
        self.feedback_visible = True
        return result

    def _complete(self) -> None:
        self.phase = GamePhase.COMPLETE
        self.feedback_visible = False
        logger.info(f"Game complete: score={self.score} songs={self.songs_completed}")

    def _round_latency(self) -> float:
        return max((self._clock() - self.round_started_at).total_seconds(), 0.0)

    def _require(self, operation: str, *phases: GamePhase) -> bool:
        if self.phase in phases:
            return True
        self._reject(operation)
        return False

    def _live_song(self, operation: str) -> Song | None:
        if not self._require(operation, GamePhase.PLAYING):
            return None
        if self.current_song is None:
            self._reject(operation, "no song is playing")
        return self.current_song

    def _reject(self, operation: str, reason: str | None = None) -> None:
        error = InvalidTransitionError(operation, self.phase.value, reason)
        if self.strict:
            raise error
        logger.warning(f"Ignoring call: {error}")
