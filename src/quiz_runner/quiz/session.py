"""Question lifecycle state machine driven by presentation events.

A :class:`QuizSession` walks an immutable question list one question at a
time. Drivers feed it discrete events (``select_answer``, ``use_hint``,
``advance``) plus a ``tick`` per host time-step, and re-render from
``snapshot()`` after each one. Events that arrive in the wrong state, such as
a second click on an already answered question, are absorbed as no-ops.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from .questions import QuizQuestion

__all__ = [
    "COIN_REWARD",
    "SCORE_REWARD",
    "AnswerRecord",
    "QuizSession",
    "QuizSummary",
    "SessionSnapshot",
    "SessionState",
]

logger = logging.getLogger(__name__)

SCORE_REWARD = 10
COIN_REWARD = 1


class SessionState(Enum):
    PRESENTING = "presenting"
    ANSWERED = "answered"
    FINISHED = "finished"


@dataclass(frozen=True)
class AnswerRecord:
    """Outcome of one answered question."""

    question_index: int
    selected_index: int
    correct_index: int
    is_correct: bool
    elapsed: float
    hint_used: bool


@dataclass(frozen=True)
class QuizSummary:
    """Totals for a session, derived from its answer history."""

    total_questions: int
    answered_questions: int
    correct_answers: int
    score: int
    coins: int
    hints_used: int
    answers: tuple[AnswerRecord, ...] = field(default_factory=tuple)

    @property
    def accuracy(self) -> float:
        if self.answered_questions == 0:
            return 0.0
        return self.correct_answers / self.answered_questions


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session handed to renderers."""

    state: SessionState
    index: int
    total: int
    question: QuizQuestion | None
    score: int
    coins: int
    elapsed: float
    hint_used: bool
    disabled_choice_index: int | None
    selected_index: int | None
    is_correct: bool | None

    @property
    def is_finished(self) -> bool:
        return self.state is SessionState.FINISHED

    @property
    def is_answered(self) -> bool:
        return self.state is SessionState.ANSWERED

    def choice_enabled(self, index: int) -> bool:
        """Whether the choice at ``index`` can still be picked."""

        return (
            self.state is SessionState.PRESENTING
            and index != self.disabled_choice_index
        )

    @property
    def hint_available(self) -> bool:
        return (
            self.state is SessionState.PRESENTING
            and not self.hint_used
            and self.question is not None
            and len(self.question.choices) > 1
        )


class QuizSession:
    """Single-player quiz over a fixed question list."""

    def __init__(
        self,
        questions: Sequence[QuizQuestion],
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._questions: tuple[QuizQuestion, ...] = tuple(questions)
        self._rng = rng if rng is not None else random.Random()
        self._reset()

    @property
    def questions(self) -> tuple[QuizQuestion, ...]:
        return self._questions

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def score(self) -> int:
        return self._score

    @property
    def coins(self) -> int:
        return self._coins

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def hint_used(self) -> bool:
        return self._hint_used

    @property
    def answered(self) -> bool:
        return self._state is SessionState.ANSWERED

    @property
    def disabled_choice_index(self) -> int | None:
        return self._disabled_choice

    @property
    def current_question(self) -> QuizQuestion | None:
        if self._state is SessionState.FINISHED:
            return None
        return self._questions[self._index]

    def start(self) -> None:
        """Enter the first question (or finish at once with no questions)."""

        self._reset()
        logger.info(
            "Quiz session started",
            extra={"question_count": len(self._questions)},
        )
        if self._state is SessionState.FINISHED:
            logger.info("Quiz finished", extra=self._totals())

    def is_finished(self) -> bool:
        return self._state is SessionState.FINISHED

    def tick(self, delta_time: float) -> None:
        """Accumulate time on the current question until it is answered."""

        if self._state is not SessionState.PRESENTING:
            return
        if not math.isfinite(delta_time) or delta_time <= 0:
            logger.debug("Ignored tick", extra={"delta_time": delta_time})
            return
        self._elapsed += delta_time

    def select_answer(self, index: int) -> bool | None:
        """Answer the current question.

        Returns ``True`` or ``False`` for a correct or wrong answer and
        ``None`` when the event was ignored (already answered, finished, or
        the choice was removed by a hint).
        """

        if self._state is not SessionState.PRESENTING:
            logger.debug(
                "Ignored answer outside presenting state",
                extra={"state": self._state.value, "selected_index": index},
            )
            return None
        if index == self._disabled_choice:
            logger.debug(
                "Ignored answer for hint-disabled choice",
                extra={"selected_index": index},
            )
            return None

        question = self._questions[self._index]
        is_correct = index == question.correct_index
        self._state = SessionState.ANSWERED
        self._selected = index
        self._is_correct = is_correct
        if is_correct:
            self._score += SCORE_REWARD
            self._coins += COIN_REWARD
        self._answers.append(
            AnswerRecord(
                question_index=self._index,
                selected_index=index,
                correct_index=question.correct_index,
                is_correct=is_correct,
                elapsed=self._elapsed,
                hint_used=self._hint_used,
            )
        )
        logger.info(
            "Correct answer" if is_correct else "Wrong answer",
            extra={
                "question_index": self._index,
                "selected_index": index,
                "score": self._score,
                "coins": self._coins,
            },
        )
        return is_correct

    def use_hint(self) -> int | None:
        """Disable one random wrong choice; returns its index when applied."""

        if self._state is not SessionState.PRESENTING or self._hint_used:
            logger.debug(
                "Ignored hint request",
                extra={"state": self._state.value, "hint_used": self._hint_used},
            )
            return None
        wrong = self._questions[self._index].wrong_indexes()
        if not wrong:
            logger.debug(
                "No wrong choice to disable",
                extra={"question_index": self._index},
            )
            return None

        self._disabled_choice = self._rng.choice(wrong)
        self._hint_used = True
        logger.info(
            "Hint used",
            extra={
                "question_index": self._index,
                "disabled_choice_index": self._disabled_choice,
            },
        )
        return self._disabled_choice

    def advance(self) -> bool:
        """Move past an answered question; returns ``False`` when ignored."""

        if self._state is not SessionState.ANSWERED:
            logger.debug(
                "Ignored advance outside answered state",
                extra={"state": self._state.value},
            )
            return False
        self._index += 1
        self._clear_question_state()
        if self._index >= len(self._questions):
            self._state = SessionState.FINISHED
            logger.info("Quiz finished", extra=self._totals())
        else:
            self._state = SessionState.PRESENTING
        return True

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self._state,
            index=self._index,
            total=len(self._questions),
            question=self.current_question,
            score=self._score,
            coins=self._coins,
            elapsed=self._elapsed,
            hint_used=self._hint_used,
            disabled_choice_index=self._disabled_choice,
            selected_index=self._selected,
            is_correct=self._is_correct,
        )

    def summary(self) -> QuizSummary:
        answers = tuple(self._answers)
        return QuizSummary(
            total_questions=len(self._questions),
            answered_questions=len(answers),
            correct_answers=sum(1 for record in answers if record.is_correct),
            score=self._score,
            coins=self._coins,
            hints_used=sum(1 for record in answers if record.hint_used),
            answers=answers,
        )

    def _reset(self) -> None:
        self._index = 0
        self._score = 0
        self._coins = 0
        self._answers: list[AnswerRecord] = []
        self._clear_question_state()
        self._state = (
            SessionState.PRESENTING
            if self._questions
            else SessionState.FINISHED
        )

    def _clear_question_state(self) -> None:
        self._elapsed = 0.0
        self._hint_used = False
        self._disabled_choice: int | None = None
        self._selected: int | None = None
        self._is_correct: bool | None = None

    def _totals(self) -> dict[str, int]:
        return {
            "score": self._score,
            "coins": self._coins,
            "answered": len(self._answers),
        }
