"""Question and submission types for the numbers wager game."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from framework.move import Move


@dataclass(frozen=True)
class Question:
    """A trivia prompt whose answer is a non-negative integer."""

    text: str
    answer: int

    def __post_init__(self) -> None:
        if isinstance(self.answer, bool) or not isinstance(self.answer, int):
            raise ValueError("Question.answer must be an integer.")
        if self.answer < 0:
            raise ValueError("Question.answer must be >= 0.")

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "answer": self.answer}


@dataclass(frozen=True)
class Guess(Move):
    """A player's numeric guess at the current question's answer."""

    player: str
    value: int
    move_type = "Guess"

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Guess.value must be >= 0.")


@dataclass(frozen=True)
class Wager(Move):
    """A player's bet on which guess is closest without going over.

    ``target`` is the guessed value being backed; ``None`` backs the claim that
    the answer is below every submitted guess.
    """

    player: str
    target: int | None
    amount: int
    move_type = "Wager"

    def __post_init__(self) -> None:
        if self.target is not None and self.target < 0:
            raise ValueError("Wager.target must be >= 0 or None.")
