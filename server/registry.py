"""Lock-guarded registry of live games keyed by session id."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
import threading

from framework.errors import GameConflictError, GameNotFoundError
from wager.wager_game import Game
from wager.wager_moves import Question

logger = logging.getLogger(__name__)


class GameRegistry:
    """In-memory game dictionary guarded by a single registry-wide lock.

    The lock is re-entrant so that ``get`` can be called both on its own and
    inside a ``session`` block.
    """

    def __init__(self) -> None:
        self._games: dict[str, Game] = {}
        self._lock = threading.RLock()

    def create(
        self,
        game_id: str,
        initial_player: str,
        initial_question: Question,
        *,
        question_source: str | None = None,
    ) -> None:
        with self._lock:
            if game_id in self._games:
                raise GameConflictError(game_id)
            game = Game(initial_question, question_source=question_source)
            game.add_player(initial_player)
            self._games[game_id] = game
        logger.info(f"Created game {game_id!r} for {initial_player!r}")

    def get(self, game_id: str) -> Game:
        """Return the live game; mutate it only inside ``session``."""
        with self._lock:
            if game_id not in self._games:
                raise GameNotFoundError(game_id)
            return self._games[game_id]

    @contextmanager
    def session(self, game_id: str) -> Iterator[Game]:
        """Hold the registry lock while the caller works on one game."""
        with self._lock:
            yield self.get(game_id)

    def delete(self, game_id: str) -> None:
        with self._lock:
            removed = self._games.pop(game_id, None)
        if removed is not None:
            logger.info(f"Deleted game {game_id!r}")

    def __contains__(self, game_id: object) -> bool:
        with self._lock:
            return game_id in self._games

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
