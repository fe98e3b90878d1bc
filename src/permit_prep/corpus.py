"""Question corpus loading and lookup."""
import json
import random
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from loguru import logger

from permit_prep.categories import all_display_names
from permit_prep.models import CHOICE_LABELS, Question

CONTENT_DIR = Path(__file__).parent / "content"
DEFAULT_FILES = ("questions.json", "traffic-signs-questions.json")


class CorpusError(ValueError):
    """A question file or record could not be turned into questions."""


def parse_question(record: dict) -> Question:
    """Build a Question from one corpus record (``questionText``, ``answerA``.. keys)."""
    if not isinstance(record, dict):
        raise CorpusError(f"question record must be a mapping, got {type(record).__name__}")
    missing = [key for key in ("id", "questionText", "correctAnswer", "category") if not record.get(key)]
    if missing:
        raise CorpusError(f"question {record.get('id', '?')} is missing {', '.join(missing)}")
    choices = {label: record.get(f"answer{label}") for label in CHOICE_LABELS}
    present = [label for label, text in choices.items() if text]
    if len(present) < 2:
        raise CorpusError(f"question {record['id']} needs at least two answer choices")
    correct = str(record["correctAnswer"]).strip().upper()
    if correct not in present:
        raise CorpusError(f"question {record['id']} has correct answer {correct!r} with no matching choice")
    return Question(
        id=str(record["id"]),
        text=record["questionText"],
        correct_answer=correct,
        category=record["category"],
        choice_a=choices["A"] or None,
        choice_b=choices["B"] or None,
        choice_c=choices["C"] or None,
        choice_d=choices["D"] or None,
        explanation=record.get("explanation") or None,
        image_name=record.get("imageName") or None,
    )


def read_question_file(file_path: str | Path) -> list[Question]:
    path = Path(file_path)
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise CorpusError(f"{path.name}: not valid UTF-8 ({e.reason} at byte {e.start})") from e
    if suffix in (".yaml", ".yml"):
        import yaml
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CorpusError(f"{path.name}: {e}") from e
    else:
        try:
            data = json.loads(text)
        except ValueError as e:
            raise CorpusError(f"{path.name}: {e}") from e
    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        raise CorpusError(f"{path.name}: expected a list of questions")
    return [parse_question(record) for record in data]


FALLBACK_QUESTIONS = (
    Question(
        id="1",
        text="What does a red octagonal sign mean?",
        choice_a="Slow down",
        choice_b="Stop",
        choice_c="Yield",
        choice_d="No parking",
        correct_answer="B",
        category="Traffic Signs",
        explanation="A red octagon is always a stop sign. You must come to a complete stop.",
    ),
    Question(
        id="2",
        text="At a four-way stop, who has the right of way?",
        choice_a="The largest vehicle",
        choice_b="The vehicle on the right",
        choice_c="The first vehicle to arrive",
        choice_d="The fastest vehicle",
        correct_answer="C",
        category="Right of Way",
        explanation="The first vehicle to reach the intersection goes first.",
    ),
    Question(
        id="3",
        text="What is the speed limit in a residential area unless posted otherwise?",
        choice_a="15 mph",
        choice_b="25 mph",
        choice_c="35 mph",
        choice_d="45 mph",
        correct_answer="B",
        category="Traffic Laws",
        explanation="The default speed limit in residential areas is 25 mph.",
    ),
)


class Corpus:
    """Immutable, in-memory set of questions."""

    def __init__(self, questions: Iterable[Question] = ()):
        self.questions: tuple[Question, ...] = tuple(questions)
        self._by_id = {q.id: q for q in self.questions}

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self):
        return iter(self.questions)

    def get(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def by_category(self, category: str) -> list[Question]:
        return [q for q in self.questions if q.category == category]

    def categories(self) -> list[str]:
        """Categories present in the corpus together with the standard taxonomy."""
        return sorted({q.category for q in self.questions} | set(all_display_names()))

    def random_questions(self, count: int, rng: Optional[random.Random] = None) -> list[Question]:
        """Unweighted random sample, used where history should not matter (e.g. a mock exam)."""
        rng = rng or random
        pool = list(self.questions)
        rng.shuffle(pool)
        return pool[:max(count, 0)]


def load_corpus(paths: Optional[Iterable[str | Path]] = None, fallback: bool = True) -> Corpus:
    """Load questions from corpus files, skipping any file that cannot be read.

    Duplicate ids keep the first question seen. With nothing loaded and
    ``fallback`` set, a small built-in question set is returned instead.
    """
    if paths is None:
        paths = [CONTENT_DIR / name for name in DEFAULT_FILES]
    loaded: dict[str, Question] = {}
    for path in paths:
        try:
            questions = read_question_file(path)
        except (OSError, CorpusError) as e:
            logger.warning("Could not load questions from {}: {}", path, e)
            continue
        for q in questions:
            if q.id in loaded:
                logger.warning("Duplicate question id {} in {}, keeping the first", q.id, Path(path).name)
                continue
            loaded[q.id] = q
        logger.info("Loaded {} questions from {}", len(questions), Path(path).name)
    if not loaded and fallback:
        logger.warning("No question files loaded, using built-in questions")
        return Corpus(FALLBACK_QUESTIONS)
    logger.info("Total questions loaded: {}", len(loaded))
    return Corpus(loaded.values())
