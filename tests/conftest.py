from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from exam_app.core.models import AnswerType, Exam, Question


class FakeClock:
    """Manually advanced clock for timing-sensitive tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 9, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scenario_exam() -> Exam:
    return Exam(
        title="Scenario",
        questions=[
            Question(
                id=1,
                text="Pick the second option",
                options=["A", "B", "C"],
                answer_type=AnswerType.SINGLE,
                correct_answer=1,
                category="Math",
                marks=1,
            ),
            Question(
                id=2,
                text="Pick the first and third options",
                options=["A", "B", "C"],
                answer_type=AnswerType.MULTIPLE,
                correct_answer={0, 2},
                category="Logic",
                marks=2,
            ),
        ],
        negative_marking_per_wrong=0.5,
        positive_marks_default=1,
    )


@pytest.fixture
def mixed_exam() -> Exam:
    return Exam(
        title="Mixed skills",
        questions=[
            Question(1, "Define inertia.", ["A", "B", "C", "D"], AnswerType.SINGLE, 0, "Physics"),
            Question(2, "Calculate 12 * 3.", ["36", "38", "24", "30"], AnswerType.SINGLE, 0, "Mathematics"),
            Question(3, "Water boils at sea level.", ["True", "False"], AnswerType.BOOLEAN, 0, "Physics"),
            Question(4, "Complete the pattern: A, C, E, ?", ["F", "G", "H", "I"], AnswerType.SINGLE, 1, "Logical Reasoning"),
            Question(5, "Choose the primes", ["4", "5", "6", "7"], AnswerType.MULTIPLE, {1, 3}, "Mathematics"),
        ],
        duration_seconds=600,
        negative_marking_per_wrong=0.25,
        positive_marks_default=1,
    )
