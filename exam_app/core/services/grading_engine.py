"""Grades a submitted answer set against an exam definition."""

from __future__ import annotations

from exam_app.constants.insight_constants import STRENGTH_THRESHOLD, WEAKNESS_THRESHOLD
from exam_app.core.models import (
    AnswerSet,
    AnswerType,
    CategoryScore,
    CategoryScores,
    Exam,
    GradedResult,
    Question,
    SubmittedAnswer,
)


def is_answer_correct(question: Question, answer: SubmittedAnswer) -> bool:
    """Return True when the answer fully matches the question's correct answer.

    Multiple-answer questions are all-or-nothing: the selected set must equal
    the correct set exactly.
    """
    if question.answer_type is AnswerType.MULTIPLE:
        if isinstance(answer, int):
            answer = frozenset({answer})
        return frozenset(answer) == question.correct_answer
    if isinstance(answer, frozenset):
        return False
    return answer == question.correct_answer


def classify_categories(category_scores: CategoryScores) -> tuple[list[str], list[str]]:
    """Split categories into strengths (>=70%) and weaknesses (<50%).

    Categories between the thresholds, and categories without any question,
    land in neither list. Order follows the mapping's insertion order.
    """
    strengths: list[str] = []
    weaknesses: list[str] = []
    for category, tally in category_scores.items():
        if tally.total == 0:
            continue
        percentage = tally.percentage
        if percentage >= STRENGTH_THRESHOLD:
            strengths.append(category)
        elif percentage < WEAKNESS_THRESHOLD:
            weaknesses.append(category)
    return strengths, weaknesses


def grade(exam: Exam, answers: AnswerSet) -> GradedResult:
    """Grade ``answers`` against ``exam``.

    Wrong answers subtract the negative marking with no floor, so the total
    may go negative. ``max_marks`` uses the exam-level default marks for every
    question even when a question overrides its own marks.
    """
    correct = 0
    wrong = 0
    unanswered = 0
    total_marks = 0.0
    penalty_marks = 0.0
    category_scores: CategoryScores = {}

    for question in exam.questions:
        tally = category_scores.setdefault(question.category, CategoryScore())
        tally.total += 1

        if question.id not in answers:
            unanswered += 1
            continue

        if is_answer_correct(question, answers[question.id]):
            correct += 1
            tally.correct += 1
            total_marks += _marks_for(question, exam)
        else:
            wrong += 1
            penalty = _penalty_for(question, exam)
            total_marks -= penalty
            penalty_marks += penalty

    total_questions = len(exam.questions)
    score = correct * 100 / total_questions if total_questions else 0.0
    strengths, weaknesses = classify_categories(category_scores)

    return GradedResult(
        correct=correct,
        wrong=wrong,
        unanswered=unanswered,
        total_questions=total_questions,
        score=score,
        total_marks=total_marks,
        max_marks=total_questions * exam.positive_marks_default,
        penalty_marks=penalty_marks,
        category_scores=category_scores,
        strengths=tuple(strengths),
        weaknesses=tuple(weaknesses),
    )


def _marks_for(question: Question, exam: Exam) -> float:
    if question.marks is None:
        return exam.positive_marks_default
    return question.marks


def _penalty_for(question: Question, exam: Exam) -> float:
    if question.negative_marks is None:
        return exam.negative_marking_per_wrong
    return question.negative_marks
