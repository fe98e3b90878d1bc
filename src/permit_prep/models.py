"""Data classes for the practice engine domain model."""
import random
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

CHOICE_LABELS = ("A", "B", "C", "D")


@dataclass(frozen=True)
class Question:
    id: str
    text: str
    correct_answer: str
    category: str
    choice_a: Optional[str] = None
    choice_b: Optional[str] = None
    choice_c: Optional[str] = None
    choice_d: Optional[str] = None
    explanation: Optional[str] = None
    image_name: Optional[str] = None

    @property
    def choices(self) -> dict[str, str]:
        """Present answer choices keyed by label, in label order."""
        values = (self.choice_a, self.choice_b, self.choice_c, self.choice_d)
        return {label: text for label, text in zip(CHOICE_LABELS, values) if text is not None}

    def is_correct(self, choice: str) -> bool:
        return choice.strip().upper() == self.correct_answer.strip().upper()

    def with_shuffled_answers(self, rng: Optional[random.Random] = None) -> "Question":
        """Return a copy with the choices permuted and the correct label remapped."""
        rng = rng or random
        answers = list(self.choices.items())
        correct_text = self.choices.get(self.correct_answer.upper())
        if correct_text is None:
            return self
        texts = [text for _, text in answers]
        rng.shuffle(texts)
        padded = texts + [None] * (len(CHOICE_LABELS) - len(texts))
        new_correct = CHOICE_LABELS[texts.index(correct_text)]
        return replace(
            self,
            choice_a=padded[0],
            choice_b=padded[1],
            choice_c=padded[2],
            choice_d=padded[3],
            correct_answer=new_correct,
        )


@dataclass(frozen=True)
class Attempt:
    question_id: str
    category: str
    correct: bool
    latency: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class QuestionPerformance:
    question_id: str
    category: str = ""
    times_seen: int = 0
    times_correct: int = 0
    times_incorrect: int = 0
    last_attempt_at: Optional[datetime] = None
    average_latency: float = 0.0

    @property
    def accuracy(self) -> float:
        if self.times_seen == 0:
            return 0.0
        return self.times_correct / self.times_seen


@dataclass(frozen=True)
class CategoryPerformance:
    category: str
    questions_answered: int = 0
    total_attempts: int = 0
    correct_attempts: int = 0

    @property
    def accuracy(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.correct_attempts / self.total_attempts

    def is_weak(self, min_answered: int = 5, threshold: float = 0.70) -> bool:
        return self.questions_answered >= min_answered and self.accuracy < threshold


class ReadinessStatus(Enum):
    NOT_READY = "not_ready"
    ALMOST_READY = "almost_ready"
    READY = "ready"

    @property
    def title(self) -> str:
        return {
            ReadinessStatus.NOT_READY: "Not Ready",
            ReadinessStatus.ALMOST_READY: "Almost Ready",
            ReadinessStatus.READY: "Ready to Test!",
        }[self]

    @property
    def color(self) -> str:
        return {
            ReadinessStatus.NOT_READY: "red",
            ReadinessStatus.ALMOST_READY: "yellow",
            ReadinessStatus.READY: "green",
        }[self]


@dataclass(frozen=True)
class ReadinessScore:
    percentage: int
    overall_accuracy: float
    questions_seen: int
    total_questions: int
    status: ReadinessStatus
    weakest_category: Optional[str] = None
    weakest_accuracy: float = 0.0
    recommendations: tuple[str, ...] = ()
