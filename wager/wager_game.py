"""Session rules for the numbers wager game."""

from __future__ import annotations

import logging
from typing import Any, Iterator

from framework.errors import (
    GuessNotFoundError,
    InvalidWagerError,
    PlayerConflictError,
    PlayerNotFoundError,
    RoundNotInCollectingGuessesStateError,
    RoundNotInCollectingWagersStateError,
    RoundNotInStartStateError,
)

from .wager_moves import Guess, Question, Wager
from .wager_round import Round, RoundState
from .wager_scoring import CLOSEST_GUESS_BONUS, PAYOUT_RATIO, accumulate

logger = logging.getLogger(__name__)


class Game:
    """A set of players and the append-only sequence of rounds they play.

    Only the last round accepts submissions. Every earlier round was Complete
    when it was superseded, since new rounds are appended exclusively by
    ``advance_round_if_complete``.
    """

    def __init__(self, question: Question | None = None, *, question_source: str | None = None):
        self.players: set[str] = set()
        self.rounds: list[Round] = []
        self.question_source = question_source
        if question is not None:
            self.advance_round_if_complete(question)

    def add_player(self, player: str) -> None:
        """Add a player; only allowed before anyone has guessed this round."""
        if self.current_round_state() is not RoundState.START:
            raise RoundNotInStartStateError()
        if player in self.players:
            raise PlayerConflictError(player)
        self.players.add(player)

    def remove_player(self, player: str) -> None:
        """Remove a player; removing an absent player is a no-op."""
        if self.current_round_state() is not RoundState.START:
            raise RoundNotInStartStateError()
        self.players.discard(player)

    def submit_guess(self, guess: Guess) -> None:
        """Add or replace the player's guess for the current round."""
        if guess.player not in self.players:
            raise PlayerNotFoundError(guess.player)
        if self.current_round_state() not in {RoundState.START, RoundState.COLLECTING_GUESSES}:
            raise RoundNotInCollectingGuessesStateError()
        self.current_round().add_or_replace_guess(guess)
        logger.debug(f"{guess.player} guessed {guess.value}")

    def submit_wager(self, wager: Wager) -> None:
        """Add or replace the player's wager for the current round."""
        if wager.player not in self.players:
            raise PlayerNotFoundError(wager.player)
        if self.current_round_state() is not RoundState.COLLECTING_WAGERS:
            raise RoundNotInCollectingWagersStateError()
        round_ = self.current_round()
        if wager.target is not None and wager.target not in round_.guessed_values():
            raise GuessNotFoundError(str(wager.target))
        available = self.score().get(wager.player, 0)
        if wager.amount < 0 or wager.amount > available:
            raise InvalidWagerError(f"{wager.amount} not in [0, {available}]")
        round_.add_or_replace_wager(wager)
        logger.debug(f"{wager.player} wagered {wager.amount} on {wager.target}")

    def advance_round_if_complete(self, question: Question) -> bool:
        """Start a new round seeded with ``question`` when the current one is done.

        Returns whether a round was appended.
        """
        if self.rounds and self.current_round_state() is not RoundState.COMPLETE:
            return False
        self.rounds.append(Round(question=question))
        return True

    def current_round(self) -> Round:
        if not self.rounds:
            raise RuntimeError("Game has no rounds.")
        return self.rounds[-1]

    def current_round_state(self) -> RoundState:
        return self.current_round().state(len(self.players))

    def is_current_round_complete(self) -> bool:
        return self.current_round_state() is RoundState.COMPLETE

    def completed_rounds(self) -> Iterator[Round]:
        """Yield every round whose guesses and wagers are all in."""
        if not self.rounds:
            return
        yield from self.rounds[:-1]
        if self.is_current_round_complete():
            yield self.rounds[-1]

    def score(self) -> dict[str, int]:
        """Return cumulative scores for current players over completed rounds."""
        return accumulate(
            self.players,
            (round_.score_changes(PAYOUT_RATIO, CLOSEST_GUESS_BONUS) for round_ in self.completed_rounds()),
        )

    def previous_round_score(self) -> dict[str, int]:
        """Return the score deltas of the round before the current one."""
        if len(self.rounds) < 2:
            return {}
        return self.rounds[-2].score_changes(PAYOUT_RATIO, CLOSEST_GUESS_BONUS)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot of the game."""
        last_index = len(self.rounds) - 1
        rounds = []
        for index, round_ in enumerate(self.rounds):
            state = self.current_round_state() if index == last_index else RoundState.COMPLETE
            rounds.append(round_.to_dict(state))
        return {
            "players": sorted(self.players),
            "question_source": self.question_source,
            "rounds": rounds,
        }
