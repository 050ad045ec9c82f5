"""Scoring rules for MusIQ rounds and sessions.

Every function here is pure: callers pass in the state they need and get
numbers back. ``GameSession`` applies the results.
"""

import math
from dataclasses import dataclass

from musiq.core.models import GameRank

MAX_PLAY_SECONDS = 5  # Longest clip; also the number of plays per round
MAX_BASE_POINTS = 6
MIN_BASE_POINTS = 1
SPEED_BONUS_THRESHOLD_SECONDS = 3.0
SPEED_BONUS_POINTS = 2
STREAK_MULTIPLIER_STEP = 0.1
MAX_STREAK_MULTIPLIER = 3.0


@dataclass(frozen=True)
class ScoreBreakdown:
    """Points awarded for a single guess."""

    base_points: int
    bonus_points: int
    speed_bonus: bool

    @property
    def total(self) -> int:
        return self.base_points + self.bonus_points


NO_POINTS = ScoreBreakdown(base_points=0, bonus_points=0, speed_bonus=False)


def base_points_for(attempts_used: int) -> int:
    """Raw points for a correct guess after ``attempts_used`` extra plays."""
    return max(MAX_BASE_POINTS - attempts_used, MIN_BASE_POINTS)


def streak_multiplier(streak: int) -> float:
    """Multiplier applied to base points for the streak held before a guess."""
    if streak <= 0:
        return 1.0
    return min(1 + streak * STREAK_MULTIPLIER_STEP, MAX_STREAK_MULTIPLIER)


def calculate_score(
    attempts_used: int,
    guess_latency_seconds: float,
    is_correct: bool,
    streak: int = 0,
) -> ScoreBreakdown:
    """Score one guess.

    Args:
        attempts_used: Attempts consumed before this guess (0 = first play).
        guess_latency_seconds: Seconds since the round started.
        is_correct: Whether the guess named the current song.
        streak: Streak before this guess is applied.

    Returns:
        ScoreBreakdown. The streak multiplier only scales base points; the
        speed bonus is added flat.
    """
    if not is_correct:
        return NO_POINTS

    speed_bonus = guess_latency_seconds < SPEED_BONUS_THRESHOLD_SECONDS
    bonus_points = SPEED_BONUS_POINTS if speed_bonus else 0
    final_base = math.floor(base_points_for(attempts_used) * streak_multiplier(streak))

    return ScoreBreakdown(
        base_points=final_base,
        bonus_points=bonus_points,
        speed_bonus=speed_bonus,
    )


def accuracy(correct_guesses: int, total_guesses: int) -> float:
    """Percentage of guesses that were correct (0 with no guesses)."""
    if total_guesses == 0:
        return 0.0
    return correct_guesses / total_guesses * 100


def average_guess_time(elapsed_seconds: float, songs_completed: int) -> float:
    """Session wall-clock time divided by songs completed.

    This is session pace, not the mean of per-round latencies.
    """
    if songs_completed == 0:
        return 0.0
    return elapsed_seconds / songs_completed


def rank_for_score(score: int) -> GameRank:
    return GameRank.for_score(score)
