"""Tests for weak-area quiz selection."""
import random
from collections import Counter

from conftest import make_corpus, record_many
from permit_prep.performance import PerformanceAggregator
from permit_prep.review import WeakAreaAllocator, allocate
from permit_prep.sampler import AdaptiveSampler


def _allocator(store, corpus, priority=None, seed=21):
    aggregator = PerformanceAggregator(store)
    sampler = AdaptiveSampler(corpus, aggregator, random.Random(seed))
    return WeakAreaAllocator(aggregator, sampler, priority)


def _record_accuracy(store, corpus, category, answered, correct):
    ids = [q.id for q in corpus.by_category(category)][:answered]
    record_many(store, ids[:correct], category, correct=True)
    record_many(store, ids[correct:], category, correct=False)


def test_allocate_proportional_to_weakness():
    assert allocate([("A", 0.3), ("B", 0.6)], 10) == [("A", 7), ("B", 4)]


def test_allocate_every_category_gets_one():
    allocation = allocate([("A", 0.0), ("B", 0.69), ("C", 0.69)], 3)
    assert all(n >= 1 for _, n in allocation)


def test_allocate_all_perfect_splits_evenly():
    assert allocate([("A", 1.0), ("B", 1.0)], 10) == [("A", 6), ("B", 6)]


def test_allocate_empty():
    assert allocate([], 10) == []


def test_weaker_category_gets_more_questions(store):
    corpus = make_corpus({"Parking": 20, "Right of Way": 20, "Traffic Laws": 20})
    _record_accuracy(store, corpus, "Parking", answered=10, correct=3)
    _record_accuracy(store, corpus, "Right of Way", answered=10, correct=6)
    for seed in range(10):
        selected = _allocator(store, corpus, seed=seed).select(10)
        counts = Counter(q.category for q in selected)
        assert len(selected) == 10
        assert counts["Parking"] > counts["Right of Way"] >= 1


def test_no_duplicates_and_never_exceeds_count(store):
    corpus = make_corpus({"Parking": 8, "Right of Way": 8, "Traffic Laws": 8, "Alcohol & Drugs": 8})
    for category in ("Parking", "Right of Way", "Traffic Laws", "Alcohol & Drugs"):
        _record_accuracy(store, corpus, category, answered=6, correct=1)
    allocator = _allocator(store, corpus)
    for count in (1, 3, 5, 10, 40):
        selected = allocator.select(count)
        assert len(selected) <= count
        assert len(selected) == len({q.id for q in selected})


def test_many_weak_categories_capped_at_count(store):
    """Allocations add up past the request; the result is trimmed to it."""
    corpus = make_corpus({"Parking": 8, "Right of Way": 8, "Traffic Laws": 8, "Alcohol & Drugs": 8})
    for category in ("Parking", "Right of Way", "Traffic Laws", "Alcohol & Drugs"):
        _record_accuracy(store, corpus, category, answered=6, correct=2)
    assert len(_allocator(store, corpus).select(3)) == 3


def test_includes_weakest_category(store):
    corpus = make_corpus({"Parking": 8, "Right of Way": 8, "Traffic Laws": 8})
    _record_accuracy(store, corpus, "Parking", answered=6, correct=1)
    _record_accuracy(store, corpus, "Right of Way", answered=6, correct=3)
    _record_accuracy(store, corpus, "Traffic Laws", answered=6, correct=4)
    for seed in range(10):
        selected = _allocator(store, corpus, seed=seed).select(2)
        assert any(q.category == "Parking" for q in selected)


def test_falls_back_to_adaptive_without_weak_categories(store):
    """No category has 5 answered questions, so the whole pool is used."""
    corpus = make_corpus({"Parking": 10, "Right of Way": 10, "Traffic Laws": 10})
    _record_accuracy(store, corpus, "Parking", answered=4, correct=0)
    categories = Counter()
    allocator = _allocator(store, corpus)
    for _ in range(20):
        selected = allocator.select(10)
        assert len(selected) == 10
        categories.update(q.category for q in selected)
    assert set(categories) == {"Parking", "Right of Way", "Traffic Laws"}


def test_tops_up_when_weak_category_runs_out(store):
    corpus = make_corpus({"Parking": 5, "Traffic Laws": 20})
    _record_accuracy(store, corpus, "Parking", answered=5, correct=0)
    selected = _allocator(store, corpus).select(10)
    counts = Counter(q.category for q in selected)
    assert len(selected) == 10
    assert counts["Parking"] == 5
    assert len({q.id for q in selected}) == 10


def test_stops_when_corpus_exhausted(store):
    corpus = make_corpus({"Parking": 5, "Traffic Laws": 2})
    _record_accuracy(store, corpus, "Parking", answered=5, correct=1)
    selected = _allocator(store, corpus).select(10)
    assert sorted(q.id for q in selected) == sorted(q.id for q in corpus)


def test_priority_categories_take_precedence(store):
    corpus = make_corpus({"Parking": 10, "Right of Way": 10, "Traffic Laws": 10})
    _record_accuracy(store, corpus, "Parking", answered=6, correct=0)
    _record_accuracy(store, corpus, "Traffic Laws", answered=6, correct=6)
    allocator = _allocator(store, corpus, priority=["Traffic Laws"])
    assert allocator.target_categories() == [("Traffic Laws", 1.0)]
    selected = allocator.select(5)
    assert all(q.category == "Traffic Laws" for q in selected)


def test_priority_categories_callable(store):
    corpus = make_corpus({"Parking": 10, "Traffic Laws": 10})
    _record_accuracy(store, corpus, "Traffic Laws", answered=2, correct=1)
    current = []
    allocator = _allocator(store, corpus, priority=lambda: current)
    assert allocator.target_categories() == []
    current.append("Traffic Laws")
    assert allocator.target_categories() == [("Traffic Laws", 0.5)]


def test_priority_categories_without_data_fall_back(store):
    corpus = make_corpus({"Parking": 10, "Traffic Laws": 10})
    _record_accuracy(store, corpus, "Parking", answered=6, correct=1)
    allocator = _allocator(store, corpus, priority=["Special Situations"])
    assert [c for c, _ in allocator.target_categories()] == ["Parking"]


def test_zero_count(store, corpus):
    assert _allocator(store, corpus).select(0) == []
