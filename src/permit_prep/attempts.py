"""Append-only attempt log backed by SQLite."""
import threading
from datetime import datetime

from loguru import logger

from permit_prep.db import get_connection
from permit_prep.models import Attempt

TOTAL_ANSWERED_KEY = "total_questions_answered"
TOTAL_CORRECT_KEY = "total_correct_answers"

_BUMP_SETTING = (
    "INSERT INTO user_settings (key, value) VALUES (?, ?) "
    "ON CONFLICT(key) DO UPDATE SET value = CAST(value AS INTEGER) + ?"
)


def _row_to_attempt(row) -> Attempt:
    return Attempt(
        question_id=row["question_id"],
        category=row["category"],
        correct=bool(row["correct"]),
        latency=row["latency"],
        timestamp=datetime.fromisoformat(row["timestamp"]),
    )


class AttemptStore:
    """Attempt log for one learner.

    Rows are only ever inserted. Each append also adds to the cumulative
    answered/correct counters kept in ``user_settings``; those counters are
    what the readiness score reads, so they include every repeat attempt.
    Appends from several threads are serialised by a lock.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._write_lock = threading.Lock()

    def append(self, attempt: Attempt) -> None:
        if not attempt.question_id:
            raise ValueError("attempt needs a question id")
        if attempt.latency < 0:
            raise ValueError(f"latency must not be negative, got {attempt.latency}")
        with self._write_lock:
            conn = get_connection(self.db_path)
            try:
                with conn:
                    conn.execute(
                        "INSERT INTO attempts (question_id, category, correct, latency, timestamp) VALUES (?, ?, ?, ?, ?)",
                        (
                            attempt.question_id,
                            attempt.category,
                            int(attempt.correct),
                            attempt.latency,
                            attempt.timestamp.isoformat(),
                        ),
                    )
                    self._bump_totals(conn, 1, int(attempt.correct))
            finally:
                conn.close()
        logger.debug(
            "Recorded attempt question={} category={} correct={}",
            attempt.question_id, attempt.category, attempt.correct,
        )

    def add_to_totals(self, answered: int, correct: int) -> None:
        """Add a batch result (e.g. a diagnostic test) to the cumulative counters."""
        if answered < 0 or correct < 0 or correct > answered:
            raise ValueError(f"invalid totals: answered={answered} correct={correct}")
        with self._write_lock:
            conn = get_connection(self.db_path)
            try:
                with conn:
                    self._bump_totals(conn, answered, correct)
            finally:
                conn.close()

    @staticmethod
    def _bump_totals(conn, answered: int, correct: int) -> None:
        conn.execute(_BUMP_SETTING, (TOTAL_ANSWERED_KEY, str(answered), answered))
        conn.execute(_BUMP_SETTING, (TOTAL_CORRECT_KEY, str(correct), correct))

    def totals(self) -> tuple[int, int]:
        """Cumulative (answered, correct) counters, read together in one statement."""
        conn = get_connection(self.db_path)
        rows = conn.execute(
            "SELECT key, value FROM user_settings WHERE key IN (?, ?)",
            (TOTAL_ANSWERED_KEY, TOTAL_CORRECT_KEY),
        ).fetchall()
        conn.close()
        values = {row["key"]: int(row["value"]) for row in rows}
        return values.get(TOTAL_ANSWERED_KEY, 0), values.get(TOTAL_CORRECT_KEY, 0)

    def _query(self, where: str = "", params: tuple = ()) -> list[Attempt]:
        conn = get_connection(self.db_path)
        rows = conn.execute(
            f"SELECT * FROM attempts {where} ORDER BY timestamp ASC, id ASC", params
        ).fetchall()
        conn.close()
        return [_row_to_attempt(r) for r in rows]

    def query_all(self) -> list[Attempt]:
        return self._query()

    def query_by_question(self, question_id: str) -> list[Attempt]:
        return self._query("WHERE question_id = ?", (question_id,))

    def query_by_category(self, category: str) -> list[Attempt]:
        return self._query("WHERE category = ?", (category,))
