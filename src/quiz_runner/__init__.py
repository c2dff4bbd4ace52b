"""Single-screen multiple-choice quiz runner."""

from .quiz import (
    ParseError,
    QuizQuestion,
    QuizSession,
    SessionSnapshot,
    SessionState,
    parse_question_set,
)

__all__ = [
    "ParseError",
    "QuizQuestion",
    "QuizSession",
    "SessionSnapshot",
    "SessionState",
    "parse_question_set",
]
