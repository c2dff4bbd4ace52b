from .questions import (
    CHOICE_COUNT,
    ParseError,
    QuizQuestion,
    load_question_set,
    parse_question_set,
)
from .session import (
    COIN_REWARD,
    SCORE_REWARD,
    AnswerRecord,
    QuizSession,
    QuizSummary,
    SessionSnapshot,
    SessionState,
)
from .console import ConsoleRunResult, run_console_quiz

__all__ = [
    "CHOICE_COUNT",
    "ParseError",
    "QuizQuestion",
    "load_question_set",
    "parse_question_set",
    "COIN_REWARD",
    "SCORE_REWARD",
    "AnswerRecord",
    "QuizSession",
    "QuizSummary",
    "SessionSnapshot",
    "SessionState",
    "ConsoleRunResult",
    "run_console_quiz",
]
