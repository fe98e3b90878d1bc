"""Sampling weight for a question based on its answer history."""
from permit_prep.models import QuestionPerformance

UNSEEN_WEIGHT = 10
MISSED_ONCE_WEIGHT = 8
STRUGGLING_WEIGHT = 10
CORRECT_ONCE_WEIGHT = 5
CORRECT_TWICE_WEIGHT = 3
MASTERED_WEIGHT = 1


def question_weight(performance: QuestionPerformance) -> int:
    """Map a question's history to an integer weight; higher means more practice needed.

    Mastered questions keep a weight of 1 so they can still resurface.
    """
    if performance.times_seen == 0:
        return UNSEEN_WEIGHT
    if performance.times_incorrect == 1:
        return MISSED_ONCE_WEIGHT
    if performance.times_incorrect >= 2:
        return STRUGGLING_WEIGHT
    if performance.times_correct == 1:
        return CORRECT_ONCE_WEIGHT
    if performance.times_correct == 2:
        return CORRECT_TWICE_WEIGHT
    return MASTERED_WEIGHT
