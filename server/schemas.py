"""Pydantic request schemas for the game API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from questions.question_source import QuestionPolicy


class _PlayerRequest(BaseModel):
    """Player names are stripped here and nowhere else."""

    model_config = ConfigDict(str_strip_whitespace=True)

    player: str = Field(min_length=1)


class PlayerData(_PlayerRequest):
    """Request body naming the player a request is made for."""


class CreateGameRequest(_PlayerRequest):
    """Request body for creating a game."""

    question_source: QuestionPolicy | None = None


class GuessRequest(_PlayerRequest):
    """Request body for submitting a guess."""

    guess: int = Field(ge=0)


class WagerRequest(_PlayerRequest):
    """Request body for submitting a wager; a null guess backs "below every guess"."""

    guess: int | None = Field(default=None, ge=0)
    wager: int
