"""Server settings loaded from the environment and CLI flags."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from framework.env_utils import getenv_any, getenv_float, getenv_int
from questions.question_source import NUMBERS_API_URL, QuestionPolicy

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass(frozen=True)
class ServerConfig:
    """Runtime configuration for the API server."""

    host: str = "0.0.0.0"
    port: int = 8172
    log_level: str = "info"
    questions_file: Path | None = None
    question_source: QuestionPolicy = QuestionPolicy.FILE
    numbers_api_url: str = NUMBERS_API_URL
    numbers_api_timeout_sec: float = 5.0
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))

    def __post_init__(self) -> None:
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {list(LOG_LEVELS)}; received {self.log_level!r}.")
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535; received {self.port}.")
        if self.numbers_api_timeout_sec <= 0:
            raise ValueError("numbers_api_timeout_sec must be > 0.")
        object.__setattr__(self, "question_source", QuestionPolicy(self.question_source))

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Build configuration from NUMBERS_WAGER_* variables (and .env)."""
        questions_file = getenv_any("NUMBERS_WAGER_QUESTIONS_FILE")
        origins = getenv_any("NUMBERS_WAGER_CORS_ORIGINS", default="*") or "*"
        return cls(
            host=getenv_any("NUMBERS_WAGER_HOST", default="0.0.0.0") or "0.0.0.0",
            port=getenv_int("NUMBERS_WAGER_PORT", 8172),
            log_level=(getenv_any("NUMBERS_WAGER_LOG_LEVEL", default="info") or "info").lower(),
            questions_file=Path(questions_file) if questions_file else None,
            question_source=QuestionPolicy(getenv_any("NUMBERS_WAGER_QUESTION_SOURCE", default="file")),
            numbers_api_url=getenv_any("NUMBERS_WAGER_NUMBERS_API_URL", default=NUMBERS_API_URL) or NUMBERS_API_URL,
            numbers_api_timeout_sec=getenv_float("NUMBERS_WAGER_NUMBERS_API_TIMEOUT", 5.0),
            cors_origins=tuple(origin.strip() for origin in origins.split(",") if origin.strip()),
        )

    def with_overrides(self, **overrides: Any) -> "ServerConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})
