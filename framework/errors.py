"""Structured exceptions for game rules and session lookups."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar


class ErrorKind(str, Enum):
    """Closed set of caller-recoverable error kinds."""

    GAME_CONFLICT = "GameConflict"
    GAME_NOT_FOUND = "GameNotFound"
    PLAYER_CONFLICT = "PlayerConflict"
    PLAYER_NOT_FOUND = "PlayerNotFound"
    ROUND_NOT_IN_START_STATE = "RoundNotInStartState"
    ROUND_NOT_IN_COLLECTING_GUESSES_STATE = "RoundNotInCollectingGuessesState"
    ROUND_NOT_IN_COLLECTING_WAGERS_STATE = "RoundNotInCollectingWagersState"
    GUESS_NOT_FOUND = "GuessNotFound"
    INVALID_WAGER = "InvalidWager"


class GameError(Exception):
    """Base class for errors reported back to the caller as a bad request."""

    kind: ClassVar[ErrorKind]
    message: ClassVar[str] = "game error"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(self.message if detail is None else f"{self.message}: {detail}")

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {"error": self.kind.value, "message": self.message}


class GameConflictError(GameError):
    """Raised when creating a session id that is already live."""

    kind = ErrorKind.GAME_CONFLICT
    message = "game conflict"


class GameNotFoundError(GameError):
    """Raised when a session id has no live game."""

    kind = ErrorKind.GAME_NOT_FOUND
    message = "game not found"


class PlayerConflictError(GameError):
    """Raised when a player name is already taken in the game."""

    kind = ErrorKind.PLAYER_CONFLICT
    message = "player conflict"


class PlayerNotFoundError(GameError):
    """Raised when a move names a player who is not in the game."""

    kind = ErrorKind.PLAYER_NOT_FOUND
    message = "player not found"


class RoundNotInStartStateError(GameError):
    kind = ErrorKind.ROUND_NOT_IN_START_STATE
    message = "round not in start state"


class RoundNotInCollectingGuessesStateError(GameError):
    kind = ErrorKind.ROUND_NOT_IN_COLLECTING_GUESSES_STATE
    message = "round not in collecting guesses state"


class RoundNotInCollectingWagersStateError(GameError):
    kind = ErrorKind.ROUND_NOT_IN_COLLECTING_WAGERS_STATE
    message = "round not in collecting wagers state"


class GuessNotFoundError(GameError):
    """Raised when a wager targets a value nobody guessed this round."""

    kind = ErrorKind.GUESS_NOT_FOUND
    message = "guess not found"


class InvalidWagerError(GameError):
    """Raised when a wager is negative or exceeds the player's score."""

    kind = ErrorKind.INVALID_WAGER
    message = "invalid wager"


class RoundStateError(RuntimeError):
    """Raised when round counters describe no reachable state."""

    def __init__(self, guesses: int, wagers: int, players: int):
        self.guesses = guesses
        self.wagers = wagers
        self.players = players
        super().__init__(
            f"Round in unknown state: guesses={guesses} wagers={wagers} players={players}"
        )
