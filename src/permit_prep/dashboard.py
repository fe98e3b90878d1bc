"""Readiness scoring: one percentage, a status tier and study recommendations."""
import math
from decimal import ROUND_HALF_UP, Decimal

from loguru import logger

from permit_prep.attempts import AttemptStore
from permit_prep.corpus import Corpus
from permit_prep.models import CategoryPerformance, ReadinessScore, ReadinessStatus
from permit_prep.performance import PerformanceAggregator

NOT_READY_MAX = 60
READY_MIN = 85
TARGET_ACCURACY = 0.90
CATEGORY_TARGET_ACCURACY = 0.80
CATEGORY_MIN_ANSWERED = 5
EXTRA_PRACTICE_RATIO = 0.2
READY_MESSAGE = "You're ready! Schedule your DMV test!"


def to_percentage(ratio: float) -> int:
    """Round a 0-1 ratio to a whole percentage, halves rounding up.

    The ratio goes through its shortest decimal form, so 0.285 is 28.5% and
    rounds to 29 rather than to the 28.4999.. its binary value gives.
    """
    return int((Decimal(repr(ratio)) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def readiness_status(percentage: int) -> ReadinessStatus:
    if percentage <= NOT_READY_MAX:
        return ReadinessStatus.NOT_READY
    if percentage < READY_MIN:
        return ReadinessStatus.ALMOST_READY
    return ReadinessStatus.READY


def get_readiness_label(percentage: int) -> str:
    return readiness_status(percentage).title


def get_readiness_color(percentage: int) -> str:
    return readiness_status(percentage).color


def weakest_category(performance: dict[str, CategoryPerformance]) -> tuple[str | None, float]:
    """Lowest-accuracy category with answers; ties go to the first one encountered."""
    answered = [p for p in performance.values() if p.questions_answered > 0]
    if not answered:
        return None, 0.0
    weakest = min(answered, key=lambda p: p.accuracy)
    return weakest.category, weakest.accuracy


def build_recommendations(overall_accuracy: float, performance: dict[str, CategoryPerformance]) -> list[str]:
    recommendations = []
    if overall_accuracy < TARGET_ACCURACY:
        recommendations.append(
            f"Improve overall accuracy to {to_percentage(TARGET_ACCURACY)}% "
            f"(currently {to_percentage(overall_accuracy)}%)"
        )
    for category, stats in performance.items():
        if stats.questions_answered > CATEGORY_MIN_ANSWERED and stats.accuracy < CATEGORY_TARGET_ACCURACY:
            needed = math.ceil(stats.questions_answered * EXTRA_PRACTICE_RATIO)
            recommendations.append(
                f"Practice {needed} more {category} questions (currently {to_percentage(stats.accuracy)}%)"
            )
    if not recommendations:
        recommendations.append(READY_MESSAGE)
    return recommendations


class ReadinessScorer:
    def __init__(self, store: AttemptStore, aggregator: PerformanceAggregator, corpus: Corpus):
        self.store = store
        self.aggregator = aggregator
        self.corpus = corpus

    def overall_accuracy(self) -> float:
        """Cumulative correct / answered, counting every attempt including repeats."""
        answered, correct = self.store.totals()
        if answered == 0:
            return 0.0
        return correct / answered

    def score(self) -> ReadinessScore:
        accuracy = self.overall_accuracy()
        percentage = to_percentage(accuracy)
        performance = self.aggregator.all_categories()
        weakest, weakest_accuracy = weakest_category(performance)
        score = ReadinessScore(
            percentage=percentage,
            overall_accuracy=accuracy,
            questions_seen=self.aggregator.questions_seen(q.id for q in self.corpus),
            total_questions=len(self.corpus),
            status=readiness_status(percentage),
            weakest_category=weakest,
            weakest_accuracy=weakest_accuracy,
            recommendations=tuple(build_recommendations(accuracy, performance)),
        )
        logger.debug("Readiness {}% ({})", score.percentage, score.status.title)
        return score
