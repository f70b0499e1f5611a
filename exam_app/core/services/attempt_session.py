"""Service for collecting a student's answers and timings during a timed attempt."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from exam_app.core.models import (
    AnswerSet,
    AnswerType,
    Exam,
    Question,
    QuestionTimes,
    SubmittedAnswer,
)


@dataclass(slots=True, frozen=True)
class AttemptSnapshot:
    """Final answers and timings handed to grading exactly once."""

    student_id: str
    answers: AnswerSet
    question_times: QuestionTimes
    started_at: datetime
    finished_at: datetime
    auto_submitted: bool

    @property
    def time_taken_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()


class AttemptSession:
    """Tracks one student's progress through an exam until submission.

    Time spent on a question accumulates across visits. Once the exam
    duration has elapsed the attempt is finalized automatically and no more
    answers are accepted.
    """

    def __init__(
        self,
        exam: Exam,
        student_id: str,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._exam = exam
        self._student_id = student_id
        self._clock = clock
        self._started_at = clock()
        self._deadline = self._started_at + timedelta(seconds=exam.duration_seconds)
        self._answers: AnswerSet = {}
        self._question_times: QuestionTimes = {}
        self._current_question_id: int | None = None
        self._visit_started_at: datetime | None = None
        self._snapshot: AttemptSnapshot | None = None

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def exam(self) -> Exam:
        return self._exam

    def get_snapshot(self) -> AttemptSnapshot | None:
        return self._snapshot

    def remaining_seconds(self) -> float:
        return max(0.0, (self._deadline - self._clock()).total_seconds())

    def is_expired(self) -> bool:
        return self._clock() >= self._deadline

    def visit_question(self, question_id: int) -> None:
        """Move to a question, banking time spent on the previous one."""
        self._ensure_open()
        self._require_question(question_id)
        now = self._clock()
        self._close_visit(now)
        self._current_question_id = question_id
        self._visit_started_at = now

    def select_option(self, question_id: int, option_index: int) -> SubmittedAnswer | None:
        """Record a selection; multiple-answer questions toggle the option.

        Returns the answer now held for the question, or None when toggling
        removed the last selected option.
        """
        self._ensure_open()
        question = self._require_question(question_id)
        if not 0 <= option_index < len(question.options):
            raise ValueError(f"Option index {option_index} is out of range.")

        if question.answer_type is not AnswerType.MULTIPLE:
            self._answers[question_id] = option_index
            return option_index

        current = self._answers.get(question_id, frozenset())
        selected = set(current) if isinstance(current, frozenset) else {current}
        selected ^= {option_index}
        if not selected:
            self._answers.pop(question_id, None)
            return None
        self._answers[question_id] = frozenset(selected)
        return self._answers[question_id]

    def check_expiry(self) -> AttemptSnapshot | None:
        """Auto-submit when the deadline has passed; returns the snapshot if it did."""
        if self._snapshot is None and self.is_expired():
            return self._finalize(auto_submitted=True)
        return None

    def submit(self) -> AttemptSnapshot:
        if self._snapshot is not None:
            raise RuntimeError("Attempt has already been submitted.")
        return self._finalize(auto_submitted=self.is_expired())

    def _finalize(self, auto_submitted: bool) -> AttemptSnapshot:
        finished_at = min(self._clock(), self._deadline)
        self._close_visit(finished_at)
        self._current_question_id = None
        self._snapshot = AttemptSnapshot(
            student_id=self._student_id,
            answers=dict(self._answers),
            question_times=dict(self._question_times),
            started_at=self._started_at,
            finished_at=finished_at,
            auto_submitted=auto_submitted,
        )
        return self._snapshot

    def _close_visit(self, now: datetime) -> None:
        if self._current_question_id is None or self._visit_started_at is None:
            return
        elapsed = max(0.0, (min(now, self._deadline) - self._visit_started_at).total_seconds())
        question_id = self._current_question_id
        self._question_times[question_id] = self._question_times.get(question_id, 0.0) + elapsed
        self._visit_started_at = None

    def _ensure_open(self) -> None:
        if self._snapshot is not None:
            raise RuntimeError("Attempt has already been submitted.")
        if self.check_expiry() is not None:
            raise RuntimeError("Time is up; the attempt was submitted automatically.")

    def _require_question(self, question_id: int) -> Question:
        question = self._exam.get_question(question_id)
        if question is None:
            raise ValueError(f"Question {question_id} is not part of this exam.")
        return question
