"""Turns a graded attempt into heuristic performance insights and a study plan.

Nothing here is a statistical model: skill types come from keyword matching,
the predicted score is a fixed optimistic bump, and the recommendation is a
template picked by score band. Sparse input (no categories, no timings, no
classified questions) degrades to empty lists and neutral text.
"""

from __future__ import annotations

from dataclasses import replace

from exam_app.constants.insight_constants import (
    EXCELLENT_SCORE_BAND,
    FAST_PACE_SECONDS,
    GENERIC_MATERIALS_TEMPLATE,
    GOOD_SCORE_BAND,
    IMPROVEMENT_BONUS_HIGH,
    IMPROVEMENT_BONUS_LOW,
    MATERIALS_PER_WEAK_CATEGORY,
    MAX_SCORE,
    SKILL_EXCELLENT_THRESHOLD,
    SKILL_GOOD_THRESHOLD,
    SKILL_LABELS,
    SLOW_PACE_SECONDS,
    SPEED_BALANCED_TEXT,
    SPEED_INSUFFICIENT_TEXT,
    SPEED_TOO_FAST_TEXT,
    SPEED_TOO_SLOW_TEXT,
    STUDY_MATERIALS,
    STUDY_SCHEDULE_TEXT,
)
from exam_app.core.models import (
    AnswerSet,
    CategoryScores,
    Insights,
    Question,
    QuestionTimes,
    SkillAnalysis,
    SkillStatus,
    SkillType,
    SpeedPace,
)
from exam_app.core.services.grading_engine import classify_categories, is_answer_correct
from exam_app.core.services.skill_classifier import classify_question

_SPEED_TEXT = {
    SpeedPace.TOO_FAST: SPEED_TOO_FAST_TEXT,
    SpeedPace.TOO_SLOW: SPEED_TOO_SLOW_TEXT,
    SpeedPace.BALANCED: SPEED_BALANCED_TEXT,
    SpeedPace.INSUFFICIENT_DATA: SPEED_INSUFFICIENT_TEXT,
}


def synthesize(
    category_scores: CategoryScores,
    overall_score: float,
    question_times: QuestionTimes,
    questions: list[Question],
    answers: AnswerSet,
) -> Insights:
    """Build insights for one attempt, including its study plan."""
    strengths, weaknesses = classify_categories(category_scores)
    skill_scores = calculate_skill_scores(questions, answers)
    speed_pace, average_time = analyze_speed(question_times)
    speed_analysis = _SPEED_TEXT[speed_pace]

    insights = Insights(
        strengths=tuple(strengths),
        weaknesses=tuple(weaknesses),
        skill_scores=skill_scores,
        skill_analysis=tuple(build_skill_analysis(skill_scores)),
        speed_pace=speed_pace,
        speed_analysis=speed_analysis,
        average_time_per_question=average_time,
        predicted_score=predict_next_score(overall_score),
        recommendation=build_recommendation(overall_score, strengths, weaknesses, speed_analysis),
        study_materials=tuple(collect_study_materials(weaknesses)),
    )
    return _with_study_plan(insights)


def calculate_skill_scores(
    questions: list[Question],
    answers: AnswerSet,
) -> dict[SkillType, float | None]:
    """Percentage correct per skill type over answered questions.

    A skill with no answered question scores ``None``. General questions are
    not scored.
    """
    tallies: dict[SkillType, list[int]] = {skill: [0, 0] for skill in SKILL_LABELS}
    for question in questions:
        skill = classify_question(question)
        if skill is SkillType.GENERAL or question.id not in answers:
            continue
        tally = tallies[skill]
        tally[1] += 1
        if is_answer_correct(question, answers[question.id]):
            tally[0] += 1

    return {
        skill: (correct * 100 / total if total else None)
        for skill, (correct, total) in tallies.items()
    }


def build_skill_analysis(skill_scores: dict[SkillType, float | None]) -> list[SkillAnalysis]:
    rows: list[SkillAnalysis] = []
    for skill, label in SKILL_LABELS.items():
        score = skill_scores.get(skill)
        rows.append(
            SkillAnalysis(
                skill=skill,
                label=label,
                score=None if score is None else round(score),
                status=_skill_status(score),
            )
        )
    return rows


def _skill_status(score: float | None) -> SkillStatus:
    if score is None:
        return SkillStatus.NO_DATA
    if score >= SKILL_EXCELLENT_THRESHOLD:
        return SkillStatus.EXCELLENT
    if score >= SKILL_GOOD_THRESHOLD:
        return SkillStatus.GOOD
    return SkillStatus.NEEDS_IMPROVEMENT


def analyze_speed(question_times: QuestionTimes) -> tuple[SpeedPace, float | None]:
    """Classify the average time per timed question."""
    if not question_times:
        return SpeedPace.INSUFFICIENT_DATA, None
    average = sum(question_times.values()) / len(question_times)
    if average < FAST_PACE_SECONDS:
        return SpeedPace.TOO_FAST, average
    if average > SLOW_PACE_SECONDS:
        return SpeedPace.TOO_SLOW, average
    return SpeedPace.BALANCED, average


def predict_next_score(overall_score: float) -> float:
    bonus = IMPROVEMENT_BONUS_HIGH if overall_score >= GOOD_SCORE_BAND else IMPROVEMENT_BONUS_LOW
    return min(MAX_SCORE, overall_score + bonus)


def get_study_materials(category: str) -> list[str]:
    materials = STUDY_MATERIALS.get(category)
    if materials is not None:
        return list(materials)
    return [template.format(category=category) for template in GENERIC_MATERIALS_TEMPLATE]


def collect_study_materials(weaknesses: list[str]) -> list[str]:
    """Top resources for each weak category, deduplicated in first-seen order."""
    collected: list[str] = []
    for category in weaknesses:
        for material in get_study_materials(category)[:MATERIALS_PER_WEAK_CATEGORY]:
            if material not in collected:
                collected.append(material)
    return collected


def build_recommendation(
    overall_score: float,
    strengths: list[str],
    weaknesses: list[str],
    speed_analysis: str,
) -> str:
    if overall_score >= EXCELLENT_SCORE_BAND:
        opening = "Excellent performance!"
        if strengths:
            opening += f" You're excelling in {', '.join(strengths)}."
        return (
            f"{opening} Focus on maintaining consistency and attempting "
            "advanced-level questions."
        )

    if overall_score >= GOOD_SCORE_BAND:
        parts = ["Good job!"]
        if strengths:
            parts.append(f"Your strengths are in {', '.join(strengths)}.")
        if weaknesses:
            parts.append(f"To improve further, focus on: {', '.join(weaknesses)}.")
        parts.append(speed_analysis)
        return " ".join(parts)

    parts = ["Keep practicing!"]
    if weaknesses:
        parts.append(f"Priority areas for improvement: {', '.join(weaknesses)}.")
        parts.append("Dedicate 60% of study time to these topics.")
    parts.append(speed_analysis)
    if weaknesses:
        parts.append("Recommended study materials are listed below.")
    return " ".join(parts)


def build_study_plan(insights: Insights) -> list[str]:
    """Ordered, human-readable action items for the next study cycle."""
    plan: list[str] = []

    if insights.weaknesses:
        plan.append(f"Priority Focus (60% time): {', '.join(insights.weaknesses)}")

    for row in insights.skill_analysis:
        if row.status is SkillStatus.NEEDS_IMPROVEMENT:
            plan.append(f"{row.label}: Currently at {row.score}%. Practice daily to reach 70%+")

    if insights.study_materials:
        plan.append("Recommended Resources:")
        plan.extend(f"  - {material}" for material in insights.study_materials)

    if insights.strengths:
        plan.append(f"Maintain Excellence (20% time): {', '.join(insights.strengths)}")

    plan.append(f"Pace: {insights.speed_analysis}")
    plan.append(f"Target Score: {insights.predicted_score:.0f}% (achievable in next attempt)")
    plan.append(STUDY_SCHEDULE_TEXT)
    return plan


def _with_study_plan(insights: Insights) -> Insights:
    return replace(insights, study_plan=tuple(build_study_plan(insights)))
