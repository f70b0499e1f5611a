"""Business logic shared by the API: publishing exams, running and grading attempts."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
import logging
from threading import Event, Lock, Thread

from exam_app.core.key_generator import KeyGenerator
from exam_app.core.models import AnswerSet, AttemptRecord, Exam, QuestionTimes, SubmittedAnswer
from exam_app.core.services.attempt_ledger import AttemptLedger, LeaderboardRow
from exam_app.core.services.attempt_session import AttemptSession, AttemptSnapshot
from exam_app.core.services.exam_repository import ExamRepository
from exam_app.core.services.grading_engine import grade
from exam_app.core.services.insight_synthesizer import synthesize

logger = logging.getLogger(__name__)


class ExamManager:
    """Facade for exam services: Repository, KeyGenerator, AttemptSession and AttemptLedger.

    Every attempt is graded exactly once, either when the student submits or
    when its deadline passes.
    """

    def __init__(
        self,
        key_generator: KeyGenerator | None = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._lock = Lock()
        self._clock = clock

        # Services
        self._repository = ExamRepository()
        self._keys = key_generator or KeyGenerator()
        self._ledger = AttemptLedger()
        self._sessions: dict[tuple[str, str], AttemptSession] = {}

    # --- Exam Repository Delegation ---

    def publish_exam(self, exam: Exam) -> Exam:
        with self._lock:
            key = self._keys.next_key(is_taken=self._repository.has_key)
            published = self._repository.add_exam(exam, key)
        logger.info(
            "Published exam %r with key %s (%d questions)",
            published.title,
            key,
            len(published.questions),
        )
        return published

    def get_exam(self, key: str) -> Exam:
        with self._lock:
            return self._repository.get_exam(key)

    def get_exams(self) -> list[Exam]:
        with self._lock:
            return self._repository.get_exams()

    # --- Attempt Session Delegation ---

    def start_attempt(self, key: str, student_id: str) -> AttemptSession:
        with self._lock:
            exam = self._repository.get_exam(key)
            if self._ledger.has_attempt(key, student_id):
                raise RuntimeError(f"Student {student_id} already submitted exam {key}.")
            session = self._sessions.get((key, student_id))
            if session is None:
                session = AttemptSession(exam, student_id, clock=self._clock)
                self._sessions[(key, student_id)] = session
                logger.info("Student %s started exam %s", student_id, key)
            return session

    def visit_question(self, key: str, student_id: str, question_id: int) -> None:
        with self._lock:
            self._require_session(key, student_id).visit_question(question_id)

    def select_option(
        self,
        key: str,
        student_id: str,
        question_id: int,
        option_index: int,
    ) -> SubmittedAnswer | None:
        with self._lock:
            return self._require_session(key, student_id).select_option(question_id, option_index)

    def finish_attempt(self, key: str, student_id: str) -> AttemptRecord:
        """Submit a running attempt and grade it."""
        with self._lock:
            session = self._require_session(key, student_id)
            snapshot = session.get_snapshot() or session.submit()
            del self._sessions[(key, student_id)]
            return self._record_snapshot(key, session.exam, snapshot)

    def expire_overdue_attempts(self) -> list[AttemptRecord]:
        """Auto-submit and grade every attempt whose time has run out."""
        records: list[AttemptRecord] = []
        with self._lock:
            for (key, student_id), session in list(self._sessions.items()):
                snapshot = session.check_expiry() or session.get_snapshot()
                if snapshot is None:
                    continue
                del self._sessions[(key, student_id)]
                records.append(self._record_snapshot(key, session.exam, snapshot))
        return records

    # --- Direct Submission ---

    def submit_answers(
        self,
        key: str,
        student_id: str,
        answers: AnswerSet,
        question_times: QuestionTimes,
        time_taken_seconds: float | None = None,
    ) -> AttemptRecord:
        """Grade answers and timings that were collected by the client."""
        with self._lock:
            exam = self._repository.get_exam(key)
            answers = {
                question_id: answer for question_id, answer in answers.items() if answer != frozenset()
            }
            self._validate_submission(exam, answers, question_times)
            now = self._clock()
            taken = time_taken_seconds
            if taken is None:
                taken = sum(question_times.values())
            snapshot = AttemptSnapshot(
                student_id=student_id,
                answers=dict(answers),
                question_times=dict(question_times),
                started_at=now,
                finished_at=now,
                auto_submitted=False,
            )
            record = self._record_snapshot(key, exam, snapshot, time_taken_seconds=taken)
            self._sessions.pop((key, student_id), None)
            return record

    # --- Attempt Ledger Delegation ---

    def get_attempt(self, key: str, student_id: str) -> AttemptRecord:
        with self._lock:
            return self._ledger.get_attempt(key, student_id)

    def get_attempts(self, key: str) -> list[AttemptRecord]:
        with self._lock:
            self._repository.get_exam(key)
            return self._ledger.get_attempts_for_exam(key)

    def get_top_scorers(self, key: str, limit: int = 3) -> list[LeaderboardRow]:
        with self._lock:
            self._repository.get_exam(key)
            return self._ledger.get_top_scorers(key, limit)

    # --- Helpers ---

    def _require_session(self, key: str, student_id: str) -> AttemptSession:
        session = self._sessions.get((key, student_id))
        if session is None:
            raise RuntimeError(f"Student {student_id} has no running attempt for exam {key}.")
        return session

    def _record_snapshot(
        self,
        key: str,
        exam: Exam,
        snapshot: AttemptSnapshot,
        time_taken_seconds: float | None = None,
    ) -> AttemptRecord:
        if self._ledger.has_attempt(key, snapshot.student_id):
            raise RuntimeError(f"Student {snapshot.student_id} already submitted exam {key}.")

        result = grade(exam, snapshot.answers)
        insights = synthesize(
            result.category_scores,
            result.score,
            snapshot.question_times,
            exam.questions,
            snapshot.answers,
        )
        record = AttemptRecord(
            exam_key=key,
            student_id=snapshot.student_id,
            answers=snapshot.answers,
            question_times=snapshot.question_times,
            time_taken_seconds=(
                snapshot.time_taken_seconds if time_taken_seconds is None else time_taken_seconds
            ),
            completed_at=snapshot.finished_at,
            result=result,
            insights=insights,
            auto_submitted=snapshot.auto_submitted,
        )
        self._ledger.record_attempt(record)
        logger.info(
            "Graded %s on exam %s: %.1f%% (%s/%s marks)%s",
            snapshot.student_id,
            key,
            result.score,
            result.total_marks,
            result.max_marks,
            " [auto-submitted]" if snapshot.auto_submitted else "",
        )
        return record

    @staticmethod
    def _validate_submission(exam: Exam, answers: AnswerSet, question_times: QuestionTimes) -> None:
        question_ids = {question.id for question in exam.questions}
        unknown = (set(answers) | set(question_times)) - question_ids
        if unknown:
            raise ValueError(f"Unknown question ids in submission: {sorted(unknown)}")
        if any(seconds < 0 for seconds in question_times.values()):
            raise ValueError("Question times cannot be negative.")
        for question_id, answer in answers.items():
            question = exam.get_question(question_id)
            selected = answer if isinstance(answer, frozenset) else {answer}
            if any(not 0 <= index < len(question.options) for index in selected):
                raise ValueError(f"Option index out of range for question {question_id}.")


def start_expiry_sweeper(manager: ExamManager, interval_seconds: float) -> tuple[Thread, Event]:
    """Periodically auto-submit overdue attempts in a daemon thread.

    Set the returned event to stop the sweeper.
    """
    stop_event = Event()

    def sweep() -> None:
        while not stop_event.wait(interval_seconds):
            for record in manager.expire_overdue_attempts():
                logger.info("Auto-submitted %s on exam %s", record.student_id, record.exam_key)

    thread = Thread(target=sweep, name="AttemptExpirySweeper", daemon=True)
    thread.start()
    return thread, stop_event
