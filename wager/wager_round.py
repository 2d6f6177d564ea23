"""Round state machine for one question cycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from framework.errors import RoundStateError
from framework.serialize import to_serializable

from .wager_moves import Guess, Question, Wager
from .wager_scoring import closest_guess, score_changes


class RoundState(str, Enum):
    """Round phases derived from guess, wager and player counts."""

    START = "Start"
    COLLECTING_GUESSES = "CollectingGuesses"
    COLLECTING_WAGERS = "CollectingWagers"
    COMPLETE = "Complete"


def round_state(guesses: int, wagers: int, players: int) -> RoundState:
    """Classify round counters, raising on combinations no valid play reaches."""
    if guesses == 0 and wagers == 0:
        return RoundState.START
    if 0 < guesses < players and wagers == 0:
        return RoundState.COLLECTING_GUESSES
    if guesses == players and wagers < players:
        return RoundState.COLLECTING_WAGERS
    if guesses == players and wagers == players:
        return RoundState.COMPLETE
    raise RoundStateError(guesses=guesses, wagers=wagers, players=players)


@dataclass
class Round:
    """One question with the guesses and wagers submitted against it."""

    question: Question
    guesses: dict[str, Guess] = field(default_factory=dict)
    wagers: dict[str, Wager] = field(default_factory=dict)

    def state(self, players: int) -> RoundState:
        """Return the derived state for a game with ``players`` players."""
        return round_state(len(self.guesses), len(self.wagers), players)

    def add_or_replace_guess(self, guess: Guess) -> None:
        self.guesses[guess.player] = guess

    def add_or_replace_wager(self, wager: Wager) -> None:
        self.wagers[wager.player] = wager

    def guessed_values(self) -> set[int]:
        """Return the distinct values guessed this round."""
        return {guess.value for guess in self.guesses.values()}

    def closest_guess(self) -> int | None:
        """Return the highest guess not over the answer, or None."""
        return closest_guess(self.guessed_values(), self.question.answer)

    def score_changes(self, payout_ratio: int, closest_guess_bonus: int) -> dict[str, int]:
        """Return per-player score deltas for this round."""
        return score_changes(
            self.guesses,
            self.wagers,
            self.question.answer,
            payout_ratio,
            closest_guess_bonus,
        )

    def to_dict(self, state: RoundState | None = None) -> dict[str, Any]:
        """Return a JSON-serializable view of the round."""
        payload = {
            "question": self.question.to_dict(),
            "guesses": [guess.to_dict() for _, guess in sorted(self.guesses.items())],
            "wagers": [wager.to_dict() for _, wager in sorted(self.wagers.items())],
            "closest_guess": self.closest_guess(),
        }
        if state is not None:
            payload["state"] = to_serializable(state)
        return payload
