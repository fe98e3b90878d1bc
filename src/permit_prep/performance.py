"""Per-question and per-category performance derived from the attempt log."""
from collections.abc import Iterable

from loguru import logger

from permit_prep.attempts import AttemptStore
from permit_prep.models import Attempt, CategoryPerformance, Question, QuestionPerformance

WEAK_MIN_ANSWERED = 5
WEAK_ACCURACY = 0.70


def question_performance(question_id: str, category: str, attempts: list[Attempt]) -> QuestionPerformance:
    """Build the performance record for one question from its attempts (oldest first)."""
    if not attempts:
        return QuestionPerformance(question_id=question_id, category=category)
    correct = sum(1 for a in attempts if a.correct)
    return QuestionPerformance(
        question_id=question_id,
        category=category,
        times_seen=len(attempts),
        times_correct=correct,
        times_incorrect=len(attempts) - correct,
        last_attempt_at=max(a.timestamp for a in attempts),
        average_latency=sum(a.latency for a in attempts) / len(attempts),
    )


def category_performance(category: str, attempts: list[Attempt]) -> CategoryPerformance:
    return CategoryPerformance(
        category=category,
        questions_answered=len({a.question_id for a in attempts}),
        total_attempts=len(attempts),
        correct_attempts=sum(1 for a in attempts if a.correct),
    )


def _group(attempts: Iterable[Attempt], key) -> dict[str, list[Attempt]]:
    groups: dict[str, list[Attempt]] = {}
    for attempt in attempts:
        groups.setdefault(key(attempt), []).append(attempt)
    return groups


class PerformanceAggregator:
    """Read-only statistics over an attempt store.

    Every call re-reads the log, so results always match its current contents.
    """

    def __init__(self, store: AttemptStore):
        self.store = store

    def for_question(self, question_id: str, category: str = "") -> QuestionPerformance:
        return question_performance(question_id, category, self.store.query_by_question(question_id))

    def for_questions(self, questions: Iterable[Question | str]) -> dict[str, QuestionPerformance]:
        """Performance keyed by question id; unseen or unknown ids get zeroed records."""
        by_question = _group(self.store.query_all(), lambda a: a.question_id)
        result = {}
        for item in questions:
            if isinstance(item, Question):
                qid, category = item.id, item.category
            else:
                qid, category = item, ""
            attempts = by_question.get(qid, [])
            if not category and attempts:
                category = attempts[-1].category
            result[qid] = question_performance(qid, category, attempts)
        return result

    def for_category(self, category: str) -> CategoryPerformance:
        return category_performance(category, self.store.query_by_category(category))

    def all_categories(self) -> dict[str, CategoryPerformance]:
        """Performance for every category that has at least one attempt, in first-seen order."""
        groups = _group(self.store.query_all(), lambda a: a.category)
        return {category: category_performance(category, attempts) for category, attempts in groups.items()}

    def weak_categories(
        self, min_answered: int = WEAK_MIN_ANSWERED, threshold: float = WEAK_ACCURACY
    ) -> list[tuple[str, float]]:
        """(category, accuracy) pairs for weak categories, weakest first."""
        weak = [
            (perf.category, perf.accuracy)
            for perf in self.all_categories().values()
            if perf.is_weak(min_answered, threshold)
        ]
        weak.sort(key=lambda pair: pair[1])
        logger.debug("Weak categories: {}", weak)
        return weak

    def questions_seen(self, question_ids: Iterable[str] | None = None) -> int:
        """Number of distinct questions with at least one attempt, optionally within ``question_ids``."""
        seen = {a.question_id for a in self.store.query_all()}
        if question_ids is None:
            return len(seen)
        return len(seen.intersection(question_ids))
