"""Weighted adaptive question selection."""
import bisect
import itertools
import random
from collections.abc import Collection, Sequence
from typing import Optional, TypeVar

from loguru import logger

from permit_prep.corpus import Corpus
from permit_prep.models import Question
from permit_prep.performance import PerformanceAggregator
from permit_prep.weights import question_weight

T = TypeVar("T")


def weighted_draw(items: Sequence[T], weights: Sequence[int], count: int, rng: random.Random) -> list[T]:
    """Draw up to ``count`` distinct items without replacement, each draw proportional to weight.

    Picking from the remaining items by weight gives the same distribution as
    drawing from a multiset (each item repeated ``weight`` times) and rejecting
    items already chosen.
    """
    remaining = [(item, weight) for item, weight in zip(items, weights) if weight > 0]
    selected = []
    while len(selected) < count and remaining:
        cumulative = list(itertools.accumulate(weight for _, weight in remaining))
        point = rng.randrange(cumulative[-1])
        index = bisect.bisect_right(cumulative, point)
        selected.append(remaining.pop(index)[0])
    return selected


class AdaptiveSampler:
    def __init__(self, corpus: Corpus, aggregator: PerformanceAggregator, rng: Optional[random.Random] = None):
        self.corpus = corpus
        self.aggregator = aggregator
        self.rng = rng or random.Random()

    def eligible(self, category: Optional[str] = None, exclude: Collection[str] = ()) -> list[Question]:
        pool = self.corpus.by_category(category) if category is not None else list(self.corpus)
        return list({q.id: q for q in pool if q.id not in exclude}.values())

    def weights(self, pool: Sequence[Question]) -> list[int]:
        performance = self.aggregator.for_questions(pool)
        return [question_weight(performance[q.id]) for q in pool]

    def select(
        self, count: int, category: Optional[str] = None, exclude: Collection[str] = ()
    ) -> list[Question]:
        """Pick up to ``count`` distinct questions, favouring ones that need practice.

        Questions whose ids are in ``exclude`` are left out of the pool. The
        result is shuffled so its order says nothing about the weights.
        """
        pool = self.eligible(category, exclude)
        if not pool or count <= 0:
            logger.debug("No adaptive selection: pool={} count={} category={}", len(pool), count, category)
            return []
        selected = weighted_draw(pool, self.weights(pool), min(count, len(pool)), self.rng)
        self.rng.shuffle(selected)
        logger.debug("Selected {} of {} questions (category={})", len(selected), len(pool), category)
        return selected
