"""Tests for data model classes."""
import random
from datetime import datetime

from permit_prep.models import (
    Attempt, CategoryPerformance, Question, QuestionPerformance, ReadinessStatus,
)


def _question(**overrides):
    fields = dict(
        id="q1", text="What does a red octagon mean?", correct_answer="B", category="Traffic Signs",
        choice_a="Slow", choice_b="Stop", choice_c="Yield", choice_d="Merge",
    )
    fields.update(overrides)
    return Question(**fields)


def test_question_choices_in_label_order():
    q = _question()
    assert list(q.choices) == ["A", "B", "C", "D"]
    assert q.choices["B"] == "Stop"


def test_question_choices_skip_missing():
    q = _question(choice_c=None, choice_d=None)
    assert q.choices == {"A": "Slow", "B": "Stop"}


def test_question_is_correct_ignores_case_and_whitespace():
    q = _question()
    assert q.is_correct("b")
    assert q.is_correct("  B ")
    assert not q.is_correct("a")


def test_with_shuffled_answers_keeps_correct_text():
    q = _question()
    for seed in range(20):
        shuffled = q.with_shuffled_answers(random.Random(seed))
        assert shuffled.choices[shuffled.correct_answer] == "Stop"
        assert sorted(shuffled.choices.values()) == sorted(q.choices.values())
        assert shuffled.id == q.id


def test_with_shuffled_answers_two_choices():
    q = _question(choice_c=None, choice_d=None, correct_answer="A")
    shuffled = q.with_shuffled_answers(random.Random(3))
    assert set(shuffled.choices) == {"A", "B"}
    assert shuffled.choices[shuffled.correct_answer] == "Slow"


def test_with_shuffled_answers_bad_label_returns_same():
    q = _question(correct_answer="D", choice_d=None)
    assert q.with_shuffled_answers(random.Random(0)) is q


def test_attempt_defaults():
    a = Attempt(question_id="q1", category="Parking", correct=True)
    assert a.latency == 0.0
    assert isinstance(a.timestamp, datetime)


def test_question_performance_unseen_accuracy_zero():
    perf = QuestionPerformance(question_id="q1")
    assert perf.times_seen == 0
    assert perf.accuracy == 0.0
    assert perf.last_attempt_at is None


def test_question_performance_accuracy():
    perf = QuestionPerformance(question_id="q1", times_seen=4, times_correct=3, times_incorrect=1)
    assert perf.accuracy == 0.75


def test_category_performance_zero_attempts():
    perf = CategoryPerformance(category="Parking")
    assert perf.accuracy == 0.0
    assert not perf.is_weak()


def test_category_performance_is_weak():
    assert CategoryPerformance("Parking", questions_answered=5, total_attempts=10, correct_attempts=6).is_weak()
    assert not CategoryPerformance("Parking", questions_answered=5, total_attempts=10, correct_attempts=7).is_weak()
    assert not CategoryPerformance("Parking", questions_answered=4, total_attempts=10, correct_attempts=1).is_weak()


def test_readiness_status_titles_and_colors():
    assert ReadinessStatus.NOT_READY.title == "Not Ready"
    assert ReadinessStatus.ALMOST_READY.title == "Almost Ready"
    assert ReadinessStatus.READY.title == "Ready to Test!"
    assert ReadinessStatus.NOT_READY.color == "red"
    assert ReadinessStatus.ALMOST_READY.color == "yellow"
    assert ReadinessStatus.READY.color == "green"
