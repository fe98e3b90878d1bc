"""Weak area identification and review quiz selection."""
from collections.abc import Callable, Sequence
from typing import Union

from loguru import logger

from permit_prep.models import Question
from permit_prep.performance import PerformanceAggregator
from permit_prep.sampler import AdaptiveSampler

PriorityCategories = Union[Sequence[str], Callable[[], Sequence[str]], None]


def allocate(categories: Sequence[tuple[str, float]], count: int) -> list[tuple[str, int]]:
    """Split ``count`` across categories in proportion to ``1 - accuracy``.

    Each category gets ``floor(count * share) + 1`` so every one contributes at
    least a question; the sum can exceed ``count`` and the caller caps it.
    """
    if not categories:
        return []
    weakness = [max(1.0 - accuracy, 0.0) for _, accuracy in categories]
    total = sum(weakness)
    allocation = []
    for (category, _), w in zip(categories, weakness):
        share = w / total if total > 0 else 1 / len(categories)
        allocation.append((category, int(count * share) + 1))
    return allocation


class WeakAreaAllocator:
    """Builds quizzes biased toward the learner's weakest categories.

    ``priority_categories`` is an optional externally supplied category list
    (or a callable returning the current one). When it names categories with
    recorded performance, those replace the locally computed weak categories.
    """

    def __init__(
        self,
        aggregator: PerformanceAggregator,
        sampler: AdaptiveSampler,
        priority_categories: PriorityCategories = None,
    ):
        self.aggregator = aggregator
        self.sampler = sampler
        self.priority_categories = priority_categories

    def _priority_list(self) -> list[str]:
        source = self.priority_categories
        if source is None:
            return []
        if callable(source):
            source = source()
        return list(source or [])

    def target_categories(self) -> list[tuple[str, float]]:
        priority = self._priority_list()
        if priority:
            performance = self.aggregator.all_categories()
            chosen = [(c, performance[c].accuracy) for c in priority if c in performance]
            if chosen:
                logger.debug("Using priority categories: {}", chosen)
                return chosen
        return self.aggregator.weak_categories()

    def select(self, count: int) -> list[Question]:
        if count <= 0:
            return []
        categories = self.target_categories()
        if not categories:
            logger.debug("No weak categories, falling back to adaptive selection")
            return self.sampler.select(count)

        selected: list[Question] = []
        used: set[str] = set()
        for category, allotted in allocate(categories, count):
            for question in self.sampler.select(allotted, category):
                if question.id not in used and len(selected) < count:
                    selected.append(question)
                    used.add(question.id)
            if len(selected) >= count:
                break

        if len(selected) < count:
            extra = self.sampler.select(count - len(selected), exclude=used)
            selected.extend(extra)
            logger.debug("Topped up weak area quiz with {} adaptive questions", len(extra))

        self.sampler.rng.shuffle(selected)
        return selected
