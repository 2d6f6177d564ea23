"""Numbers wager package exports."""

from .wager_game import Game
from .wager_moves import Guess, Question, Wager
from .wager_round import Round, RoundState, round_state
from .wager_scoring import (
    CLOSEST_GUESS_BONUS,
    PAYOUT_RATIO,
    STARTING_SCORE,
    accumulate,
    closest_guess,
    score_changes,
)

__all__ = [
    "CLOSEST_GUESS_BONUS",
    "Game",
    "Guess",
    "PAYOUT_RATIO",
    "Question",
    "Round",
    "RoundState",
    "STARTING_SCORE",
    "Wager",
    "accumulate",
    "closest_guess",
    "round_state",
    "score_changes",
]
