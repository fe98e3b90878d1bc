"""Practice engine: records answers and picks the next questions to study."""
import random
from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from loguru import logger

from permit_prep.attempts import AttemptStore
from permit_prep.corpus import Corpus
from permit_prep.dashboard import ReadinessScorer
from permit_prep.diagnostic import DIAGNOSTIC_SIZE, DiagnosticResult, score_diagnostic
from permit_prep.models import Attempt, CategoryPerformance, Question, QuestionPerformance, ReadinessScore
from permit_prep.performance import PerformanceAggregator
from permit_prep.review import PriorityCategories, WeakAreaAllocator
from permit_prep.sampler import AdaptiveSampler


class PracticeEngine:
    """Wires the attempt store and corpus into the selection and scoring components.

    Build one per learner and pass it to whatever needs it.
    """

    def __init__(
        self,
        store: AttemptStore,
        corpus: Corpus,
        rng: Optional[random.Random] = None,
        priority_categories: PriorityCategories = None,
    ):
        self.store = store
        self.corpus = corpus
        self.aggregator = PerformanceAggregator(store)
        self.rng = rng or random.Random()
        self.sampler = AdaptiveSampler(corpus, self.aggregator, self.rng)
        self.allocator = WeakAreaAllocator(self.aggregator, self.sampler, priority_categories)
        self.scorer = ReadinessScorer(store, self.aggregator, corpus)

    def record_attempt(
        self,
        question_id: str,
        category: str,
        correct: bool,
        latency: float = 0.0,
        timestamp: Optional[datetime] = None,
    ) -> Attempt:
        attempt = Attempt(
            question_id=question_id,
            category=category,
            correct=correct,
            latency=latency,
            timestamp=timestamp or datetime.now(),
        )
        self.store.append(attempt)
        return attempt

    def answer(self, question: Question, choice: str, latency: float = 0.0) -> bool:
        """Grade ``choice`` for ``question``, record the attempt and return whether it was right."""
        is_correct = question.is_correct(choice)
        self.record_attempt(question.id, question.category, is_correct, latency)
        logger.info("Answered {} ({}): {}", question.id, question.category, "correct" if is_correct else "incorrect")
        return is_correct

    def select_adaptive(self, count: int, category: Optional[str] = None) -> list[Question]:
        return self.sampler.select(count, category)

    def select_weak_area(self, count: int = 10) -> list[Question]:
        return self.allocator.select(count)

    def compute_readiness(self) -> ReadinessScore:
        return self.scorer.score()

    def category_performance(self) -> dict[str, CategoryPerformance]:
        return self.aggregator.all_categories()

    def question_performance(self, ids: Iterable[str]) -> dict[str, QuestionPerformance]:
        """Performance for the given ids; categories come from the corpus when it knows the id."""
        items = [self.corpus.get(qid) or qid for qid in ids]
        return self.aggregator.for_questions(items)

    def weak_categories(self) -> list[tuple[str, float]]:
        return self.aggregator.weak_categories()

    def diagnostic_questions(self, count: int = DIAGNOSTIC_SIZE) -> list[Question]:
        """Unweighted random draw, each question with its answer choices reshuffled."""
        return [q.with_shuffled_answers(self.rng) for q in self.corpus.random_questions(count, self.rng)]

    def record_diagnostic(self, answers: Iterable[tuple[Question, bool]], time_taken: float = 0.0) -> DiagnosticResult:
        """Score a finished diagnostic and add it to the cumulative counters.

        Diagnostic answers feed the readiness totals only; they are not written
        to the attempt log, so they do not change question weights.
        """
        result = score_diagnostic(answers, time_taken)
        self.store.add_to_totals(result.total_questions, result.score)
        logger.info("Diagnostic scored {}/{} (passed={})", result.score, result.total_questions, result.passed)
        return result
