"""Domain models for the exam application."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

SubmittedAnswer = int | frozenset[int]
AnswerSet = dict[int, SubmittedAnswer]
QuestionTimes = dict[int, float]


class AnswerType(str, Enum):
    """How many options a question expects to be selected."""

    SINGLE = "single"
    MULTIPLE = "multiple"
    BOOLEAN = "boolean"


class SkillType(str, Enum):
    """Skill a question exercises, inferred from its wording."""

    THEORETICAL = "theoretical"
    MATHEMATICAL = "mathematical"
    LOGICAL = "logical"
    PROBLEM_SOLVING = "problem_solving"
    GENERAL = "general"


class SkillStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs_improvement"
    NO_DATA = "no_data"


class SpeedPace(str, Enum):
    TOO_FAST = "too_fast"
    BALANCED = "balanced"
    TOO_SLOW = "too_slow"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(slots=True)
class Question:
    """A single assessable item of an exam."""

    id: int
    text: str
    options: list[str]
    answer_type: AnswerType
    correct_answer: SubmittedAnswer
    category: str
    marks: float | None = None  # Falls back to the exam's default when unset
    negative_marks: float | None = None  # Falls back to the exam's negative marking

    def __post_init__(self) -> None:
        self.answer_type = AnswerType(self.answer_type)
        if self.answer_type is AnswerType.MULTIPLE:
            self.correct_answer = to_option_set(self.correct_answer)


@dataclass(slots=True)
class Exam:
    """Ordered questions plus the scoring and timing configuration."""

    title: str
    questions: list[Question]
    duration_seconds: int = 1800
    negative_marking_per_wrong: float = 0.0
    positive_marks_default: float = 1.0
    key: str | None = None
    exam_id: str | None = None
    created_at: datetime | None = None

    def get_question(self, question_id: int) -> Question | None:
        return next((q for q in self.questions if q.id == question_id), None)


@dataclass(slots=True)
class CategoryScore:
    """Correct/total tally for one category."""

    correct: int = 0
    total: int = 0

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return self.correct * 100 / self.total

    def to_dict(self) -> dict[str, int]:
        return {"correct": self.correct, "total": self.total}


CategoryScores = dict[str, CategoryScore]


@dataclass(slots=True, frozen=True)
class GradedResult:
    """Immutable outcome of grading one submitted answer set."""

    correct: int
    wrong: int
    unanswered: int
    total_questions: int
    score: float
    total_marks: float
    max_marks: float
    penalty_marks: float
    category_scores: CategoryScores
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "correct": self.correct,
            "wrong": self.wrong,
            "unanswered": self.unanswered,
            "total_questions": self.total_questions,
            "score": self.score,
            "total_marks": self.total_marks,
            "max_marks": self.max_marks,
            "penalty_marks": self.penalty_marks,
            "category_scores": {
                category: score.to_dict() for category, score in self.category_scores.items()
            },
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
        }


@dataclass(slots=True, frozen=True)
class SkillAnalysis:
    """Display row for one skill type."""

    skill: SkillType
    label: str
    score: int | None
    status: SkillStatus

    def to_dict(self) -> dict[str, object]:
        return {
            "skill": self.skill.value,
            "label": self.label,
            "score": self.score,
            "status": self.status.value,
        }


@dataclass(slots=True, frozen=True)
class Insights:
    """Heuristic performance analysis derived from a graded attempt."""

    strengths: tuple[str, ...]
    weaknesses: tuple[str, ...]
    skill_scores: dict[SkillType, float | None]
    skill_analysis: tuple[SkillAnalysis, ...]
    speed_pace: SpeedPace
    speed_analysis: str
    average_time_per_question: float | None
    predicted_score: float
    recommendation: str
    study_materials: tuple[str, ...]
    difficulty_pattern: str = "stable"
    study_plan: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "skill_scores": {skill.value: score for skill, score in self.skill_scores.items()},
            "skill_analysis": [row.to_dict() for row in self.skill_analysis],
            "speed_pace": self.speed_pace.value,
            "speed_analysis": self.speed_analysis,
            "average_time_per_question": self.average_time_per_question,
            "predicted_score": self.predicted_score,
            "recommendation": self.recommendation,
            "study_materials": list(self.study_materials),
            "difficulty_pattern": self.difficulty_pattern,
            "study_plan": list(self.study_plan),
        }


@dataclass(slots=True, frozen=True)
class AttemptRecord:
    """A finished attempt, laid out the way attempts are stored (exam key + student id)."""

    exam_key: str
    student_id: str
    answers: AnswerSet
    question_times: QuestionTimes
    time_taken_seconds: float
    completed_at: datetime
    result: GradedResult
    insights: Insights
    auto_submitted: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "exam_key": self.exam_key,
            "student_id": self.student_id,
            "answers": {
                str(question_id): answer_to_json(answer) for question_id, answer in self.answers.items()
            },
            "question_times": {
                str(question_id): seconds for question_id, seconds in self.question_times.items()
            },
            "time_taken_seconds": self.time_taken_seconds,
            "completed_at": self.completed_at.isoformat(),
            "auto_submitted": self.auto_submitted,
            "result": self.result.to_dict(),
            "insights": self.insights.to_dict(),
        }


def to_option_set(value: object) -> frozenset[int]:
    """Coerce an index or an iterable of indices into a frozenset."""
    if isinstance(value, int):
        return frozenset({value})
    return frozenset(int(item) for item in value)


def normalize_answers(raw_answers: dict[object, object]) -> AnswerSet:
    """Build an AnswerSet from loosely typed input such as decoded JSON.

    Keys are coerced to ints, lists and tuples become frozensets, and plain
    integers are kept as single selections. An empty selection means the
    question was left unanswered, so its key is dropped.
    """
    answers: AnswerSet = {}
    for raw_key, raw_value in raw_answers.items():
        question_id = int(raw_key)
        if isinstance(raw_value, (list, tuple, set, frozenset)):
            if not raw_value:
                continue
            answers[question_id] = to_option_set(raw_value)
        else:
            answers[question_id] = int(raw_value)
    return answers


def answer_to_json(answer: SubmittedAnswer) -> int | list[int]:
    if isinstance(answer, frozenset):
        return sorted(answer)
    return answer
