"""FastAPI server exposing the numbers wager game API."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from framework.errors import GameError
from questions.question_source import (
    NumbersApiQuestionSource,
    QuestionLookup,
    QuestionPolicy,
    RotatingQuestionSource,
)
from server.config import LOG_LEVELS, ServerConfig
from server.schemas import CreateGameRequest, GuessRequest, PlayerData, WagerRequest
from server.session import GameSessions
from wager.wager_moves import Guess, Wager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")


def get_sessions(request: Request) -> GameSessions:
    """Resolve the session service owned by the running app."""
    return request.app.state.sessions


def _bad_request(exc: GameError) -> HTTPException:
    return HTTPException(status_code=400, detail=exc.to_dict())


@router.get("/heartbeat", response_class=PlainTextResponse)
def heartbeat() -> str:
    """Liveness endpoint."""
    return "heartbeat"


@router.put("/game/{game_id}")
def create_game(game_id: str, body: CreateGameRequest, sessions: GameSessions = Depends(get_sessions)) -> None:
    """Create a game with the requesting player as its first member."""
    try:
        sessions.create_game(game_id, body.player, body.question_source)
    except GameError as exc:
        raise _bad_request(exc) from exc


@router.post("/game/{game_id}")
def join_game(game_id: str, body: PlayerData, sessions: GameSessions = Depends(get_sessions)) -> None:
    """Join an existing game before its current round starts."""
    try:
        sessions.join_game(game_id, body.player)
    except GameError as exc:
        raise _bad_request(exc) from exc


@router.get("/game/{game_id}")
def get_game(game_id: str, sessions: GameSessions = Depends(get_sessions)) -> dict:
    """Return a snapshot of the game."""
    try:
        return sessions.get_game(game_id)
    except GameError as exc:
        raise _bad_request(exc) from exc


@router.post("/game/{game_id}/guess")
def submit_guess(game_id: str, body: GuessRequest, sessions: GameSessions = Depends(get_sessions)) -> None:
    """Submit or replace a guess for the current round."""
    try:
        sessions.submit_guess(game_id, Guess(player=body.player, value=body.guess))
    except GameError as exc:
        raise _bad_request(exc) from exc


@router.post("/game/{game_id}/wager")
def submit_wager(game_id: str, body: WagerRequest, sessions: GameSessions = Depends(get_sessions)) -> None:
    """Submit or replace a wager; the last wager of a round starts the next one."""
    try:
        sessions.submit_wager(game_id, Wager(player=body.player, target=body.guess, amount=body.wager))
    except GameError as exc:
        raise _bad_request(exc) from exc


@router.delete("/game/{game_id}/exit")
def exit_game(game_id: str, body: PlayerData, sessions: GameSessions = Depends(get_sessions)) -> None:
    """Leave a game before its current round starts."""
    try:
        sessions.exit_game(game_id, body.player)
    except GameError as exc:
        raise _bad_request(exc) from exc


@router.delete("/game/{game_id}")
def delete_game(game_id: str, sessions: GameSessions = Depends(get_sessions)) -> None:
    """Delete a game; deleting a missing game succeeds."""
    sessions.delete_game(game_id)


@router.get("/game/{game_id}/score")
def get_score(game_id: str, sessions: GameSessions = Depends(get_sessions)) -> dict[str, int]:
    """Return cumulative scores over completed rounds."""
    try:
        return sessions.get_score(game_id)
    except GameError as exc:
        raise _bad_request(exc) from exc


@router.get("/game/{game_id}/previous-round-score")
def get_previous_round_score(game_id: str, sessions: GameSessions = Depends(get_sessions)) -> dict[str, int]:
    """Return the score changes from the last completed round."""
    try:
        return sessions.get_previous_round_score(game_id)
    except GameError as exc:
        raise _bad_request(exc) from exc


def build_question_lookup(config: ServerConfig) -> QuestionLookup:
    """Create the question lookup described by ``config``."""
    if config.questions_file is not None:
        local = RotatingQuestionSource.from_file(config.questions_file)
    else:
        local = RotatingQuestionSource()
    remote = NumbersApiQuestionSource(
        local,
        url=config.numbers_api_url,
        timeout_sec=config.numbers_api_timeout_sec,
    )
    return QuestionLookup(local=local, remote=remote)


def create_app(config: ServerConfig | None = None, sessions: GameSessions | None = None) -> FastAPI:
    """Build an app that owns its own game registry."""
    config = config or ServerConfig.from_env()
    if sessions is None:
        sessions = GameSessions(build_question_lookup(config), default_policy=config.question_source)

    app = FastAPI(title="Numbers Wager API", version="0.1.0")
    app.state.config = config
    app.state.sessions = sessions
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint that serves the API with uvicorn."""
    parser = argparse.ArgumentParser(description="Serve the numbers wager game API.")
    parser.add_argument("--questions-file", type=Path, default=None, help="File of 'question,answer' lines.")
    parser.add_argument("--host", "-H", default=None)
    parser.add_argument("--port", "-P", type=int, default=None)
    parser.add_argument("--log-level", choices=list(LOG_LEVELS), default=None)
    parser.add_argument(
        "--question-source",
        choices=[policy.value for policy in QuestionPolicy],
        default=None,
        help="Default question source for new games.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=(args.log_level or "info").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        config = ServerConfig.from_env().with_overrides(
            questions_file=args.questions_file,
            host=args.host,
            port=args.port,
            log_level=args.log_level,
            question_source=args.question_source,
        )
    except ValueError as exc:
        logger.error(f"Invalid configuration: {exc}")
        return 1
    logging.getLogger().setLevel(config.log_level.upper())
    try:
        app = create_app(config)
    except (OSError, ValueError) as exc:
        logger.error(f"Failed to load questions from {config.questions_file}: {exc}")
        return 1

    import uvicorn

    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
