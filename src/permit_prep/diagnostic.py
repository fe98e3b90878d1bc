"""Diagnostic test: a short unweighted quiz scored as one batch."""
import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from permit_prep.dashboard import to_percentage
from permit_prep.models import Question
from permit_prep.performance import WEAK_ACCURACY

DIAGNOSTIC_SIZE = 15
PASS_RATIO = 0.8


@dataclass(frozen=True)
class CategoryScore:
    correct: int = 0
    total: int = 0

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0

    @property
    def is_weak(self) -> bool:
        return self.accuracy < WEAK_ACCURACY


@dataclass(frozen=True)
class DiagnosticResult:
    score: int
    total_questions: int
    categories: dict[str, CategoryScore] = field(default_factory=dict)
    time_taken: float = 0.0

    @property
    def pass_threshold(self) -> int:
        return math.ceil(self.total_questions * PASS_RATIO)

    @property
    def passed(self) -> bool:
        return self.total_questions > 0 and self.score >= self.pass_threshold

    @property
    def percentage(self) -> int:
        return to_percentage(self.score / self.total_questions) if self.total_questions else 0


def score_diagnostic(answers: Iterable[tuple[Question, bool]], time_taken: float = 0.0) -> DiagnosticResult:
    """Tally (question, was_correct) pairs overall and per category."""
    counts: dict[str, list[int]] = {}
    for question, was_correct in answers:
        tally = counts.setdefault(question.category, [0, 0])
        tally[0] += int(was_correct)
        tally[1] += 1
    categories = {name: CategoryScore(correct, total) for name, (correct, total) in counts.items()}
    return DiagnosticResult(
        score=sum(s.correct for s in categories.values()),
        total_questions=sum(s.total for s in categories.values()),
        categories=categories,
        time_taken=time_taken,
    )
