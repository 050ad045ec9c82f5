"""Game rules and session state for MusIQ."""

from musiq.game.controller import GameController
from musiq.game.scoring import ScoreBreakdown, calculate_score, streak_multiplier
from musiq.game.session import GameSession

__all__ = [
    "GameController",
    "GameSession",
    "ScoreBreakdown",
    "calculate_score",
    "streak_multiplier",
]
