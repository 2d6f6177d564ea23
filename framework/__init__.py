"""Framework exports shared by the game, question and server packages."""

from .errors import (
    ErrorKind,
    GameConflictError,
    GameError,
    GameNotFoundError,
    GuessNotFoundError,
    InvalidWagerError,
    PlayerConflictError,
    PlayerNotFoundError,
    RoundNotInCollectingGuessesStateError,
    RoundNotInCollectingWagersStateError,
    RoundNotInStartStateError,
    RoundStateError,
)
from .move import Move

__all__ = [
    "ErrorKind",
    "GameConflictError",
    "GameError",
    "GameNotFoundError",
    "GuessNotFoundError",
    "InvalidWagerError",
    "Move",
    "PlayerConflictError",
    "PlayerNotFoundError",
    "RoundNotInCollectingGuessesStateError",
    "RoundNotInCollectingWagersStateError",
    "RoundNotInStartStateError",
    "RoundStateError",
]
