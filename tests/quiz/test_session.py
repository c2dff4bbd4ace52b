from __future__ import annotations

import random

import pytest

from quiz_runner.quiz.questions import QuizQuestion, parse_question_set
from quiz_runner.quiz.session import (
    COIN_REWARD,
    SCORE_REWARD,
    QuizSession,
    SessionState,
)


def _question(correct: int = 1, choices=("a", "b", "c", "d")) -> QuizQuestion:
    return QuizQuestion(prompt="Q", choices=tuple(choices), correct_index=correct)


def test_end_to_end_scenario():
    questions = parse_question_set("h1,h2,h3,h4,h5,h6\nWhat is 2+2?,3,4,5,6,1")
    session = QuizSession(questions, rng=random.Random(0))
    session.start()

    assert session.select_answer(1) is True
    assert (session.score, session.coins) == (10, 1)
    assert session.snapshot().is_correct is True

    assert session.select_answer(1) is None
    assert (session.score, session.coins) == (10, 1)

    assert session.advance() is True
    assert session.is_finished() is True
    assert session.snapshot().question is None


def test_initial_state_presents_first_question(session):
    snap = session.snapshot()

    assert snap.state is SessionState.PRESENTING
    assert snap.index == 0
    assert snap.total == 3
    assert snap.question.prompt == "What is 2+2?"
    assert (snap.score, snap.coins, snap.elapsed) == (0, 0, 0.0)
    assert snap.selected_index is None
    assert snap.is_correct is None
    assert snap.hint_available is True


def test_empty_session_is_finished_after_start():
    session = QuizSession([])
    session.start()

    assert session.is_finished() is True
    assert session.snapshot().state is SessionState.FINISHED
    assert session.summary().total_questions == 0


def test_wrong_answer_scores_nothing(session):
    assert session.select_answer(0) is False

    snap = session.snapshot()
    assert snap.state is SessionState.ANSWERED
    assert snap.selected_index == 0
    assert snap.is_correct is False
    assert (snap.score, snap.coins) == (0, 0)


@pytest.mark.parametrize("first, second", [(1, 1), (1, 0), (0, 1), (3, 2)])
def test_repeated_answers_apply_once(session, first, second):
    session.select_answer(first)
    score, coins = session.score, session.coins

    assert session.select_answer(second) is None
    assert (session.score, session.coins) == (score, coins)
    assert session.snapshot().selected_index == first


def test_rewards_are_flat(session):
    session.select_answer(1)
    session.advance()
    session.select_answer(0)
    session.advance()
    session.select_answer(3)

    assert session.score == 3 * SCORE_REWARD
    assert session.coins == 3 * COIN_REWARD


def test_tick_accumulates_only_while_presenting(session):
    session.tick(0.5)
    session.tick(0.25)
    assert session.elapsed == pytest.approx(0.75)

    session.select_answer(1)
    session.tick(5.0)
    assert session.elapsed == pytest.approx(0.75)


def test_tick_ignores_negative_delta(session):
    session.tick(1.0)
    session.tick(-3.0)

    assert session.elapsed == pytest.approx(1.0)


@pytest.mark.parametrize("delta", [float("nan"), float("inf"), float("-inf")])
def test_tick_ignores_non_finite_delta(session, delta):
    session.tick(0.5)
    session.tick(delta)
    session.tick(0.25)

    assert session.elapsed == pytest.approx(0.75)


def test_tick_after_finish_is_noop():
    session = QuizSession([])
    session.start()
    session.tick(2.0)

    assert session.elapsed == 0.0


def test_hint_never_disables_correct_choice():
    question = _question(correct=2)
    for seed in range(50):
        session = QuizSession([question], rng=random.Random(seed))
        session.start()
        disabled = session.use_hint()
        assert disabled in (0, 1, 3)
        assert session.disabled_choice_index == disabled
        assert session.hint_used is True


def test_hint_covers_every_wrong_choice():
    question = _question(correct=0)
    seen = set()
    for seed in range(200):
        session = QuizSession([question], rng=random.Random(seed))
        seen.add(session.use_hint())

    assert seen == {1, 2, 3}


def test_second_hint_is_noop(session):
    first = session.use_hint()

    assert session.use_hint() is None
    assert session.disabled_choice_index == first


def test_hint_after_answer_is_noop(session):
    session.select_answer(0)

    assert session.use_hint() is None
    assert session.hint_used is False
    assert session.disabled_choice_index is None


def test_hint_with_single_choice_is_unavailable():
    session = QuizSession([_question(correct=0, choices=("only",))])
    session.start()

    assert session.snapshot().hint_available is False
    assert session.use_hint() is None
    assert session.hint_used is False
    assert session.select_answer(0) is True


def test_hint_disabled_choice_cannot_be_selected(session):
    disabled = session.use_hint()

    assert session.select_answer(disabled) is None
    assert session.state is SessionState.PRESENTING
    assert session.snapshot().choice_enabled(disabled) is False
    assert session.select_answer(1) is True


def test_advance_requires_answer(session):
    assert session.advance() is False
    assert session.current_index == 0


def test_advance_resets_question_state(session):
    session.tick(3.0)
    session.use_hint()
    session.select_answer(1)

    assert session.advance() is True

    snap = session.snapshot()
    assert snap.state is SessionState.PRESENTING
    assert snap.index == 1
    assert snap.elapsed == 0.0
    assert snap.hint_used is False
    assert snap.disabled_choice_index is None
    assert snap.selected_index is None
    assert snap.is_correct is None
    assert session.answered is False
    assert snap.score == 10


def test_hint_is_rerolled_for_each_question():
    questions = [_question(correct=0), _question(correct=0)]
    session = QuizSession(questions, rng=random.Random(3))
    session.start()
    session.use_hint()
    session.select_answer(0)
    session.advance()

    assert session.use_hint() is not None
    assert session.hint_used is True


def test_finished_session_ignores_events(session):
    for correct in (1, 0, 3):
        session.select_answer(correct)
        session.advance()

    assert session.is_finished() is True
    assert session.select_answer(0) is None
    assert session.use_hint() is None
    assert session.advance() is False
    assert session.current_index == 3
    assert session.score == 30


def test_start_resets_score_and_position(session):
    session.select_answer(1)
    session.advance()

    session.start()

    assert (session.current_index, session.score, session.coins) == (0, 0, 0)
    assert session.summary().answered_questions == 0


def test_summary_records_answers(session):
    session.tick(1.5)
    session.use_hint()
    session.select_answer(1)
    session.advance()
    session.select_answer(2)

    summary = session.summary()

    assert summary.total_questions == 3
    assert summary.answered_questions == 2
    assert summary.correct_answers == 1
    assert summary.hints_used == 1
    assert summary.accuracy == pytest.approx(0.5)
    first, second = summary.answers
    assert first.is_correct is True
    assert first.elapsed == pytest.approx(1.5)
    assert first.hint_used is True
    assert (second.selected_index, second.correct_index) == (2, 0)


def test_summary_accuracy_handles_zero():
    assert QuizSession([]).summary().accuracy == 0.0


def test_questions_are_copied(sample_questions):
    session = QuizSession(sample_questions)
    sample_questions.clear()

    assert len(session.questions) == 3
