"""Service for validating and storing published exams."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from exam_app.constants.exam_constants import BOOLEAN_OPTIONS, MIN_CHOICE_OPTIONS
from exam_app.core.models import AnswerType, Exam, Question, to_option_set


class ExamRepository:
    """Holds published exams keyed by their join key.

    Exams are validated once, when they are added.
    """

    def __init__(self) -> None:
        self._exams: dict[str, Exam] = {}

    def add_exam(self, exam: Exam, key: str) -> Exam:
        """Validate ``exam`` and store a normalized copy under ``key``."""
        if key in self._exams:
            raise ValueError(f"Exam key {key} is already in use.")
        prepared = self.prepare_exam(exam)
        prepared.key = key
        self._exams[key] = prepared
        return prepared

    def get_exam(self, key: str) -> Exam:
        try:
            return self._exams[key]
        except KeyError:
            raise KeyError(f"No exam published with key {key}") from None

    def has_key(self, key: str) -> bool:
        return key in self._exams

    def get_exams(self) -> list[Exam]:
        return list(self._exams.values())

    def prepare_exam(self, exam: Exam) -> Exam:
        """Return a validated copy of ``exam`` with sequential question ids."""
        title = exam.title.strip()
        if not title:
            raise ValueError("Exam title must not be empty.")
        if not exam.questions:
            raise ValueError("Exam must contain at least one question.")
        if exam.duration_seconds <= 0:
            raise ValueError("Exam duration must be a positive number of seconds.")
        if exam.positive_marks_default <= 0:
            raise ValueError("Positive marks must be greater than zero.")
        if exam.negative_marking_per_wrong < 0:
            raise ValueError("Negative marking cannot be below zero.")

        questions = [
            self._prepare_question(question, question_id)
            for question_id, question in enumerate(exam.questions, start=1)
        ]
        return Exam(
            title=title,
            questions=questions,
            duration_seconds=exam.duration_seconds,
            negative_marking_per_wrong=exam.negative_marking_per_wrong,
            positive_marks_default=exam.positive_marks_default,
            key=exam.key,
            exam_id=exam.exam_id or str(uuid4()),
            created_at=exam.created_at or datetime.utcnow(),
        )

    def _prepare_question(self, question: Question, question_id: int) -> Question:
        cleaned_text = question.text.strip()
        if not cleaned_text:
            raise ValueError("Question text must not be empty.")
        category = question.category.strip()
        if not category:
            raise ValueError("Question category must not be empty.")
        if question.marks is not None and question.marks <= 0:
            raise ValueError("Question marks must be greater than zero.")
        if question.negative_marks is not None and question.negative_marks < 0:
            raise ValueError("Question negative marks cannot be below zero.")

        if question.answer_type is AnswerType.BOOLEAN:
            options = list(BOOLEAN_OPTIONS)
        else:
            options = self._validate_options(question.options)

        return Question(
            id=question_id,
            text=cleaned_text,
            options=options,
            answer_type=question.answer_type,
            correct_answer=self._validate_correct_answer(question, len(options)),
            category=category,
            marks=question.marks,
            negative_marks=question.negative_marks,
        )

    @staticmethod
    def _validate_options(options: list[str]) -> list[str]:
        if len(options) < MIN_CHOICE_OPTIONS:
            raise ValueError(f"Each question must have at least {MIN_CHOICE_OPTIONS} options.")
        cleaned = [option.strip() for option in options]
        if any(not option for option in cleaned):
            raise ValueError("Option text cannot be empty.")
        return cleaned

    @staticmethod
    def _validate_correct_answer(question: Question, option_count: int) -> int | frozenset[int]:
        if question.answer_type is AnswerType.MULTIPLE:
            indices = to_option_set(question.correct_answer)
            if not indices:
                raise ValueError("Multiple-answer questions need at least one correct option.")
            if any(not 0 <= index < option_count for index in indices):
                raise ValueError("Correct option indices must refer to existing options.")
            return indices

        if not isinstance(question.correct_answer, int):
            raise ValueError("Single-answer questions take exactly one correct option index.")
        if not 0 <= question.correct_answer < option_count:
            raise ValueError(f"Correct option index must be between 0 and {option_count - 1}.")
        return question.correct_answer
