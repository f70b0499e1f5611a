from __future__ import annotations

import pytest

from exam_app.constants.insight_constants import STUDY_SCHEDULE_TEXT
from exam_app.core.models import CategoryScore, SkillStatus, SkillType, SpeedPace
from exam_app.core.services.grading_engine import grade
from exam_app.core.services.insight_synthesizer import (
    analyze_speed,
    build_recommendation,
    calculate_skill_scores,
    collect_study_materials,
    get_study_materials,
    predict_next_score,
    synthesize,
)


def test_scenario_insights(scenario_exam):
    answers = {1: 1, 2: frozenset({0})}
    result = grade(scenario_exam, answers)

    insights = synthesize(result.category_scores, result.score, {1: 30, 2: 40}, scenario_exam.questions, answers)

    assert insights.strengths == ("Math",)
    assert insights.weaknesses == ("Logic",)
    assert insights.predicted_score == 60
    assert insights.speed_pace is SpeedPace.BALANCED
    assert insights.average_time_per_question == 35


@pytest.mark.parametrize(
    ("correct", "total", "bucket"),
    [(7, 10, "strength"), (1, 2, "neutral"), (49999, 100000, "weakness"), (3, 5, "neutral")],
)
def test_strength_and_weakness_thresholds(correct, total, bucket):
    insights = synthesize({"Topic": CategoryScore(correct, total)}, 50, {}, [], {})

    assert ("Topic" in insights.strengths) == (bucket == "strength")
    assert ("Topic" in insights.weaknesses) == (bucket == "weakness")


def test_categories_keep_first_seen_order():
    scores = {
        "Zoology": CategoryScore(0, 2),
        "Algebra": CategoryScore(2, 2),
        "Botany": CategoryScore(0, 1),
        "Chemistry": CategoryScore(3, 3),
    }

    insights = synthesize(scores, 50, {}, [], {})

    assert insights.strengths == ("Algebra", "Chemistry")
    assert insights.weaknesses == ("Zoology", "Botany")


@pytest.mark.parametrize(("score", "expected"), [(98, 100), (60, 65), (59, 69), (0, 10), (100, 100)])
def test_predicted_score_is_capped(score, expected):
    assert predict_next_score(score) == expected


def test_skill_scores_only_count_answered_classified_questions(mixed_exam):
    # Q1 theoretical right, Q2 mathematical wrong, Q4 logical unanswered,
    # Q3 and Q5 are general.
    answers = {1: 0, 2: 1, 3: 0, 5: frozenset({1, 3})}

    scores = calculate_skill_scores(mixed_exam.questions, answers)

    assert scores[SkillType.THEORETICAL] == 100
    assert scores[SkillType.MATHEMATICAL] == 0
    assert scores[SkillType.LOGICAL] is None
    assert scores[SkillType.PROBLEM_SOLVING] is None
    assert SkillType.GENERAL not in scores


def test_skill_analysis_statuses(mixed_exam):
    answers = {1: 0, 2: 1}
    result = grade(mixed_exam, answers)

    insights = synthesize(result.category_scores, result.score, {}, mixed_exam.questions, answers)

    statuses = {row.skill: row.status for row in insights.skill_analysis}
    assert statuses[SkillType.THEORETICAL] is SkillStatus.EXCELLENT
    assert statuses[SkillType.MATHEMATICAL] is SkillStatus.NEEDS_IMPROVEMENT
    assert statuses[SkillType.LOGICAL] is SkillStatus.NO_DATA
    assert "Mathematical Ability: Currently at 0%. Practice daily to reach 70%+" in insights.study_plan
    assert not any(line.startswith("Logical Reasoning: Currently") for line in insights.study_plan)


@pytest.mark.parametrize(
    ("times", "pace"),
    [
        ({1: 5, 2: 10}, SpeedPace.TOO_FAST),
        ({1: 20}, SpeedPace.BALANCED),
        ({1: 60}, SpeedPace.BALANCED),
        ({1: 61, 2: 100}, SpeedPace.TOO_SLOW),
        ({}, SpeedPace.INSUFFICIENT_DATA),
    ],
)
def test_speed_classification(times, pace):
    assert analyze_speed(times)[0] is pace


def test_study_materials_for_known_and_unknown_categories():
    assert get_study_materials("Physics")[0] == "NCERT Physics Textbooks (Class 11-12)"
    assert get_study_materials("Astronomy")[0] == "Search online tutorials for Astronomy"

    materials = collect_study_materials(["Physics", "Astronomy", "Geology"])

    assert materials == [
        "NCERT Physics Textbooks (Class 11-12)",
        "HC Verma - Concepts of Physics",
        "Search online tutorials for Astronomy",
        "YouTube educational channels",
        "Search online tutorials for Geology",
    ]


def test_study_plan_order(mixed_exam):
    answers = {1: 1, 2: 1, 3: 0, 4: 1}
    result = grade(mixed_exam, answers)

    insights = synthesize(result.category_scores, result.score, {1: 70, 2: 80}, mixed_exam.questions, answers)
    plan = list(insights.study_plan)

    assert insights.weaknesses == ("Mathematics",)
    assert insights.strengths == ("Logical Reasoning",)
    assert plan[0] == "Priority Focus (60% time): Mathematics"
    assert plan[1] == "Theoretical Knowledge: Currently at 0%. Practice daily to reach 70%+"
    assert plan[2] == "Mathematical Ability: Currently at 0%. Practice daily to reach 70%+"
    assert plan[3] == "Recommended Resources:"
    assert plan[4:6] == ["  - RD Sharma Mathematics", "  - NCERT Mathematics (Class 11-12)"]
    assert plan[6] == "Maintain Excellence (20% time): Logical Reasoning"
    assert plan[7].startswith("Pace: You took considerable time")
    assert plan[8] == "Target Score: 50% (achievable in next attempt)"
    assert plan[9] == STUDY_SCHEDULE_TEXT
    assert len(plan) == 10


def test_sparse_input_degrades_gracefully():
    insights = synthesize({}, 0, {}, [], {})

    assert insights.strengths == ()
    assert insights.weaknesses == ()
    assert insights.study_materials == ()
    assert insights.speed_pace is SpeedPace.INSUFFICIENT_DATA
    assert insights.average_time_per_question is None
    assert all(score is None for score in insights.skill_scores.values())
    assert insights.predicted_score == 10
    assert insights.difficulty_pattern == "stable"
    assert list(insights.study_plan) == [
        "Pace: Not enough timing data to analyze your pace yet.",
        "Target Score: 10% (achievable in next attempt)",
        STUDY_SCHEDULE_TEXT,
    ]


def test_recommendation_bands():
    excellent = build_recommendation(90, ["Physics"], [], "pace")
    good = build_recommendation(65, ["Physics"], ["Math"], "pace")
    low = build_recommendation(30, [], ["Math"], "pace")

    assert excellent.startswith("Excellent performance! You're excelling in Physics.")
    assert good == "Good job! Your strengths are in Physics. To improve further, focus on: Math. pace"
    assert low.startswith("Keep practicing! Priority areas for improvement: Math.")
    assert low.endswith("Recommended study materials are listed below.")
    assert build_recommendation(90, [], [], "pace").startswith("Excellent performance! Focus on")


def test_insights_serialize_to_plain_data(scenario_exam):
    answers = {1: 1}
    result = grade(scenario_exam, answers)

    data = synthesize(result.category_scores, result.score, {1: 12.5}, scenario_exam.questions, answers).to_dict()

    assert data["speed_pace"] == "too_fast"
    assert data["skill_scores"] == {
        "theoretical": None,
        "mathematical": None,
        "logical": None,
        "problem_solving": None,
    }
    assert isinstance(data["study_plan"], list)
