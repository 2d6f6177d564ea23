"""Question supply: a rotating local list and the numbersapi.com trivia feed."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from enum import Enum
import logging
from pathlib import Path
import random
import threading
from typing import Any

from framework.http_utils import get_json
from wager.wager_moves import Question

logger = logging.getLogger(__name__)

DEFAULT_QUESTION = Question(text="What question would you like to be asked?", answer=0)
NUMBERS_API_URL = "http://numbersapi.com/random/trivia?json"
NUMBERS_API_ATTEMPTS = 5
NUMBERS_API_PLACEHOLDER = "What"


class QuestionPolicy(str, Enum):
    """Where a session draws its questions from."""

    FILE = "file"
    NUMBERS_API = "numbers_api"


class QuestionSource(ABC):
    """Anything that can always produce another question."""

    @abstractmethod
    def next(self) -> Question:
        """Return the next question; must not raise for transient failures."""


class RotatingQuestionSource(QuestionSource):
    """Cycles through a list shuffled once at construction time."""

    def __init__(
        self,
        questions: Iterable[Question] = (),
        *,
        rng: random.Random | None = None,
        shuffle: bool = True,
    ):
        self._questions = list(questions)
        if shuffle:
            (rng or random.Random()).shuffle(self._questions)
        self._index = 0
        self._lock = threading.Lock()

    @classmethod
    def from_file(cls, path: str | Path, *, rng: random.Random | None = None) -> "RotatingQuestionSource":
        """Load ``text,answer`` lines from a file."""
        source_path = Path(path)
        questions = parse_questions(source_path.read_text(encoding="utf-8").splitlines(), origin=str(source_path))
        logger.info(f"Loaded {len(questions)} questions from {source_path}")
        return cls(questions, rng=rng)

    def __len__(self) -> int:
        return len(self._questions)

    def next(self) -> Question:
        if not self._questions:
            return DEFAULT_QUESTION
        with self._lock:
            index = self._index
            self._index = (index + 1) % len(self._questions)
        return self._questions[index]


def parse_questions(lines: Iterable[str], *, origin: str = "<questions>") -> list[Question]:
    """Parse ``text,answer`` lines, splitting on the last comma."""
    questions: list[Question] = []
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line:
            continue
        text, sep, answer = line.rpartition(",")
        if not sep or not text.strip():
            raise ValueError(f"{origin}:{line_number}: expected 'question,answer'; received {line!r}.")
        try:
            value = int(answer.strip())
        except ValueError as exc:
            raise ValueError(f"{origin}:{line_number}: value after comma should be a number; received {line!r}.") from exc
        questions.append(Question(text=text.strip(), answer=value))
    return questions


def question_from_numbers_payload(payload: Any) -> Question:
    """Turn a numbersapi trivia fact into a question about its number."""
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object; received {type(payload).__name__}.")
    text = payload.get("text")
    number = payload.get("number")
    if not isinstance(text, str):
        raise ValueError("Numbers API payload is missing 'text'.")
    if isinstance(number, bool) or not isinstance(number, int) or number < 0:
        raise ValueError(f"Numbers API payload has unusable 'number': {number!r}.")
    question = text.replace(str(number), NUMBERS_API_PLACEHOLDER)
    return Question(text=question[:-1] + "?", answer=number)


class NumbersApiQuestionSource(QuestionSource):
    """Fetches trivia from numbersapi.com, falling back to a local source."""

    def __init__(
        self,
        fallback: QuestionSource,
        *,
        url: str = NUMBERS_API_URL,
        attempts: int = NUMBERS_API_ATTEMPTS,
        timeout_sec: float = 5.0,
        fetch_json: Callable[..., Any] = get_json,
    ):
        if attempts < 1:
            raise ValueError("attempts must be >= 1.")
        self.fallback = fallback
        self.url = url
        self.attempts = attempts
        self.timeout_sec = timeout_sec
        self._fetch_json = fetch_json

    def fetch(self) -> Question:
        """Run one remote attempt; raises on any failure."""
        payload = self._fetch_json(self.url, timeout_sec=self.timeout_sec)
        return question_from_numbers_payload(payload)

    def next(self) -> Question:
        for attempt in range(1, self.attempts + 1):
            try:
                return self.fetch()
            except (RuntimeError, ValueError) as exc:
                logger.warning(f"Numbers API attempt {attempt}/{self.attempts} failed: {exc}")
        logger.warning("Numbers API unavailable, using local questions")
        return self.fallback.next()


class QuestionLookup:
    """Dispatches question requests to the source for a policy."""

    def __init__(self, local: RotatingQuestionSource | None = None, remote: QuestionSource | None = None):
        self.local = local or RotatingQuestionSource()
        self.remote = remote or NumbersApiQuestionSource(self.local)

    def source_for(self, policy: QuestionPolicy | str) -> QuestionSource:
        if QuestionPolicy(policy) is QuestionPolicy.NUMBERS_API:
            return self.remote
        return self.local

    def next(self, policy: QuestionPolicy | str = QuestionPolicy.FILE) -> Question:
        return self.source_for(policy).next()
