import random
import pytest

from permit_prep.attempts import AttemptStore
from permit_prep.corpus import Corpus
from permit_prep.db import init_db
from permit_prep.engine import PracticeEngine
from permit_prep.models import Attempt, Question


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_prep.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    init_db(tmp_db)
    return AttemptStore(tmp_db)


def make_question(qid: str, category: str = "Traffic Laws") -> Question:
    return Question(
        id=qid,
        text=f"Question {qid}?",
        choice_a="First",
        choice_b="Second",
        choice_c="Third",
        choice_d="Fourth",
        correct_answer="A",
        category=category,
        explanation=f"Explanation for {qid}",
    )


def make_corpus(sizes: dict[str, int]) -> Corpus:
    """Corpus with ``sizes[category]`` questions per category, ids like ``traffic-laws-0``."""
    questions = []
    for category, size in sizes.items():
        prefix = category.lower().replace(" ", "-").replace("&", "and")
        questions.extend(make_question(f"{prefix}-{i}", category) for i in range(size))
    return Corpus(questions)


def record_many(store: AttemptStore, question_ids, category: str, correct: bool, times: int = 1) -> None:
    for _ in range(times):
        for qid in question_ids:
            store.append(Attempt(question_id=qid, category=category, correct=correct))


@pytest.fixture
def corpus():
    return make_corpus({"Traffic Laws": 10, "Parking": 10, "Right of Way": 10})


@pytest.fixture
def engine(store, corpus):
    return PracticeEngine(store, corpus, rng=random.Random(1234))
