"""Service for keeping finished attempts and ranking them per exam."""

from __future__ import annotations

from dataclasses import dataclass

from exam_app.core.models import AttemptRecord


@dataclass(slots=True, frozen=True)
class LeaderboardRow:
    """Immutable ranking entry returned to consumers."""

    student_id: str
    score: float
    total_marks: float
    time_taken_seconds: float


class AttemptLedger:
    """Stores graded attempts keyed by (exam key, student id)."""

    def __init__(self) -> None:
        self._attempts: dict[tuple[str, str], AttemptRecord] = {}

    def has_attempt(self, exam_key: str, student_id: str) -> bool:
        return (exam_key, student_id) in self._attempts

    def record_attempt(self, record: AttemptRecord) -> None:
        """Store a graded attempt; each student gets one attempt per exam."""
        ledger_key = (record.exam_key, record.student_id)
        if ledger_key in self._attempts:
            raise RuntimeError(
                f"Student {record.student_id} already submitted exam {record.exam_key}."
            )
        self._attempts[ledger_key] = record

    def get_attempt(self, exam_key: str, student_id: str) -> AttemptRecord:
        try:
            return self._attempts[(exam_key, student_id)]
        except KeyError:
            raise KeyError(f"No attempt by {student_id} for exam {exam_key}") from None

    def get_attempts_for_exam(self, exam_key: str) -> list[AttemptRecord]:
        return [record for (key, _), record in self._attempts.items() if key == exam_key]

    def get_top_scorers(self, exam_key: str, limit: int = 3) -> list[LeaderboardRow]:
        """Return the top N attempts sorted by marks, then by time taken."""
        sorted_records = sorted(
            self.get_attempts_for_exam(exam_key),
            key=lambda r: (-r.result.total_marks, r.time_taken_seconds),
        )
        return [
            LeaderboardRow(
                student_id=record.student_id,
                score=record.result.score,
                total_marks=record.result.total_marks,
                time_taken_seconds=record.time_taken_seconds,
            )
            for record in sorted_records[:limit]
        ]
