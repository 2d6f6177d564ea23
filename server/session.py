"""Session operations combining the game registry with question supply."""

from __future__ import annotations

import logging
from typing import Any

from framework.errors import GameConflictError, GameNotFoundError
from questions.question_source import QuestionLookup, QuestionPolicy
from wager.wager_moves import Guess, Question, Wager

from server.registry import GameRegistry

logger = logging.getLogger(__name__)


class GameSessions:
    """The operations a transport layer may perform on live games.

    Question fetches never run while the registry lock is held, so a slow
    remote source cannot stall moves in other sessions.
    """

    def __init__(
        self,
        questions: QuestionLookup | None = None,
        registry: GameRegistry | None = None,
        *,
        default_policy: QuestionPolicy | str = QuestionPolicy.FILE,
    ) -> None:
        self.questions = questions or QuestionLookup()
        self.registry = registry or GameRegistry()
        self.default_policy = QuestionPolicy(default_policy)

    def create_game(self, game_id: str, player: str, policy: QuestionPolicy | str | None = None) -> None:
        resolved = QuestionPolicy(policy) if policy is not None else self.default_policy
        # Cheap pre-check so a taken id does not consume a question; create() re-checks.
        if game_id in self.registry:
            raise GameConflictError(game_id)
        question = self._next_question(resolved)
        self.registry.create(game_id, player, question, question_source=resolved.value)

    def join_game(self, game_id: str, player: str) -> None:
        with self.registry.session(game_id) as game:
            game.add_player(player)
        logger.info(f"{player!r} joined game {game_id!r}")

    def get_game(self, game_id: str) -> dict[str, Any]:
        with self.registry.session(game_id) as game:
            return game.to_dict()

    def submit_guess(self, game_id: str, guess: Guess) -> None:
        with self.registry.session(game_id) as game:
            game.submit_guess(guess)

    def submit_wager(self, game_id: str, wager: Wager) -> None:
        with self.registry.session(game_id) as game:
            game.submit_wager(wager)
            if not game.is_current_round_complete():
                return
            policy = game.question_source or self.default_policy.value

        question = self._next_question(policy)
        try:
            with self.registry.session(game_id) as game:
                advanced = game.advance_round_if_complete(question)
                round_count = len(game.rounds)
        except GameNotFoundError:
            logger.info(f"Game {game_id!r} was deleted before its next round started")
            return
        if advanced:
            logger.info(f"Game {game_id!r} started round {round_count}")

    def _next_question(self, policy: QuestionPolicy | str) -> Question:
        """Fetch a question for ``policy``, falling back to the local list on any failure.

        A completed round stays current until this returns, so readers briefly
        see it as Complete with the previous round score still pointing one back.
        """
        try:
            return self.questions.next(policy)
        except Exception as exc:
            logger.exception(f"Question source {policy!r} failed: {exc}")
            return self.questions.local.next()

    def exit_game(self, game_id: str, player: str) -> None:
        with self.registry.session(game_id) as game:
            game.remove_player(player)
        logger.info(f"{player!r} left game {game_id!r}")

    def delete_game(self, game_id: str) -> None:
        self.registry.delete(game_id)

    def get_score(self, game_id: str) -> dict[str, int]:
        with self.registry.session(game_id) as game:
            return game.score()

    def get_previous_round_score(self, game_id: str) -> dict[str, int]:
        with self.registry.session(game_id) as game:
            return game.previous_round_score()
