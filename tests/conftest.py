from __future__ import annotations

import logging
import os
import random
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from fixtures import SAMPLE_CSV, WorkspaceBuilder  # noqa: E402

ROOT = TESTS_DIR.parent
for extra in (ROOT, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from quiz_runner.core.logging import release_logger  # noqa: E402
from quiz_runner.quiz.questions import parse_question_set  # noqa: E402
from quiz_runner.quiz.session import QuizSession  # noqa: E402


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def sample_questions():
    return parse_question_set(SAMPLE_CSV)


@pytest.fixture
def session(sample_questions) -> QuizSession:
    """Started session over the sample questions with a fixed hint seed."""

    quiz = QuizSession(sample_questions, rng=random.Random(7))
    quiz.start()
    return quiz


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("QUIZ_RUNNER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _release_quiz_logger() -> Iterator[None]:
    yield
    release_logger(logging.getLogger("quiz_runner"))
