"""Registry and session-service tests, including concurrent access."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from framework.errors import GameConflictError, GameNotFoundError, RoundNotInStartStateError
from questions.question_source import (
    NumbersApiQuestionSource,
    QuestionLookup,
    QuestionPolicy,
    QuestionSource,
    RotatingQuestionSource,
    question_from_numbers_payload,
)
from server.registry import GameRegistry
from server.session import GameSessions
from wager.wager_moves import Guess, Question, Wager
from wager.wager_round import RoundState

QUESTION = Question(text="What is 2 + 2?", answer=4)


class _CountingSource(RotatingQuestionSource):
    """Local source that records how often it was asked."""

    def __init__(self, questions: list[Question]) -> None:
        super().__init__(questions, shuffle=False)
        self.calls = 0

    def next(self) -> Question:
        self.calls += 1
        return super().next()


def _sessions(*questions: Question) -> tuple[GameSessions, _CountingSource]:
    source = _CountingSource(list(questions) or [QUESTION])
    return GameSessions(QuestionLookup(local=source)), source


def test_create_get_delete() -> None:
    registry = GameRegistry()
    registry.create("g1", "alice", QUESTION)

    game = registry.get("g1")
    assert game.players == {"alice"}
    assert len(game.rounds) == 1

    with pytest.raises(GameConflictError):
        registry.create("g1", "bob", QUESTION)

    registry.delete("g1")
    registry.delete("g1")
    with pytest.raises(GameNotFoundError):
        registry.get("g1")


def test_session_context_yields_live_game() -> None:
    registry = GameRegistry()
    registry.create("g1", "alice", QUESTION)
    with registry.session("g1") as game:
        game.add_player("bob")
    assert registry.get("g1").players == {"alice", "bob"}

    with pytest.raises(GameNotFoundError):
        with registry.session("missing"):
            pass


def test_concurrent_create_has_exactly_one_winner() -> None:
    registry = GameRegistry()

    def _attempt(index: int) -> bool:
        try:
            registry.create("shared", f"player-{index}", QUESTION)
        except GameConflictError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(_attempt, range(32)))

    assert outcomes.count(True) == 1
    assert len(registry) == 1


def test_concurrent_guesses_from_distinct_players_all_land() -> None:
    sessions, _ = _sessions()
    players = [f"player-{index}" for index in range(24)]
    sessions.create_game("g1", players[0])
    for player in players[1:]:
        sessions.join_game("g1", player)

    def _guess(index: int) -> None:
        sessions.submit_guess("g1", Guess(player=players[index], value=index))

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(_guess, range(len(players))))

    game = sessions.registry.get("g1")
    assert len(game.current_round().guesses) == len(players)
    assert game.current_round_state() is RoundState.COLLECTING_WAGERS


def test_create_conflict_does_not_consume_a_question() -> None:
    sessions, source = _sessions()
    sessions.create_game("g1", "alice")
    with pytest.raises(GameConflictError):
        sessions.create_game("g1", "bob")
    assert source.calls == 1


def test_last_wager_starts_next_round_with_fresh_question() -> None:
    second = Question(text="How many legs does a spider have?", answer=8)
    sessions, _ = _sessions(QUESTION, second)
    sessions.create_game("g1", "alice")
    sessions.join_game("g1", "bob")

    sessions.submit_guess("g1", Guess(player="alice", value=3))
    sessions.submit_guess("g1", Guess(player="bob", value=6))
    sessions.submit_wager("g1", Wager(player="alice", target=3, amount=1))
    assert len(sessions.registry.get("g1").rounds) == 1

    sessions.submit_wager("g1", Wager(player="bob", target=None, amount=1))

    snapshot = sessions.get_game("g1")
    assert len(snapshot["rounds"]) == 2
    assert snapshot["rounds"][1]["question"] == second.to_dict()
    assert snapshot["rounds"][1]["state"] == "Start"
    assert sessions.get_score("g1") == {"alice": 7, "bob": 1}
    assert sessions.get_previous_round_score("g1") == {"alice": 6, "bob": 0}


def test_exit_and_delete_are_idempotent() -> None:
    sessions, _ = _sessions()
    sessions.create_game("g1", "alice")
    sessions.exit_game("g1", "ghost")
    sessions.exit_game("g1", "ghost")
    sessions.delete_game("missing")
    sessions.delete_game("missing")

    sessions.submit_guess("g1", Guess(player="alice", value=1))
    with pytest.raises(RoundNotInStartStateError):
        sessions.exit_game("g1", "alice")


def test_previous_round_score_is_empty_for_first_round() -> None:
    sessions, _ = _sessions()
    sessions.create_game("g1", "alice")
    assert sessions.get_previous_round_score("g1") == {}
    with pytest.raises(GameNotFoundError):
        sessions.get_score("missing")


class _BrokenSource(QuestionSource):
    """Remote source failing with an error no source is expected to raise."""

    def next(self) -> Question:
        raise KeyError("text")


def _play_round(sessions: GameSessions, game_id: str) -> None:
    sessions.submit_guess(game_id, Guess(player="alice", value=3))
    sessions.submit_guess(game_id, Guess(player="bob", value=6))
    sessions.submit_wager(game_id, Wager(player="alice", target=3, amount=1))
    sessions.submit_wager(game_id, Wager(player="bob", target=None, amount=1))


def test_failing_remote_source_falls_back_to_local_for_next_round() -> None:
    second = Question(text="How many legs does a spider have?", answer=8)
    source = _CountingSource([QUESTION, second])
    sessions = GameSessions(QuestionLookup(local=source, remote=_BrokenSource()))
    sessions.create_game("g1", "alice", QuestionPolicy.NUMBERS_API)
    sessions.join_game("g1", "bob")

    _play_round(sessions, "g1")

    snapshot = sessions.get_game("g1")
    assert [round_["state"] for round_ in snapshot["rounds"]] == ["Complete", "Start"]
    assert snapshot["rounds"][0]["question"] == QUESTION.to_dict()
    assert snapshot["rounds"][1]["question"] == second.to_dict()
    assert source.calls == 2


def test_numbers_api_game_draws_each_round_from_remote() -> None:
    facts = iter(
        [
            {"text": "4 is the number of seasons.", "number": 4},
            {"text": "8 is the number of legs on a spider.", "number": 8},
        ]
    )
    urls: list[str] = []

    def _fetch(url: str, timeout_sec: float) -> dict:
        urls.append(url)
        return next(facts)

    local = _CountingSource([QUESTION])
    remote = NumbersApiQuestionSource(local, url="http://example.test/trivia", fetch_json=_fetch)
    sessions = GameSessions(QuestionLookup(local=local, remote=remote))
    sessions.create_game("g1", "alice", "numbers_api")
    sessions.join_game("g1", "bob")

    _play_round(sessions, "g1")

    snapshot = sessions.get_game("g1")
    assert snapshot["question_source"] == QuestionPolicy.NUMBERS_API.value
    expected = question_from_numbers_payload({"text": "8 is the number of legs on a spider.", "number": 8})
    assert snapshot["rounds"][1]["question"] == expected.to_dict()
    assert expected.answer == 8
    assert urls == ["http://example.test/trivia", "http://example.test/trivia"]
    assert local.calls == 0
