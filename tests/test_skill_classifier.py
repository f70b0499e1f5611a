from __future__ import annotations

import pytest

from exam_app.core.models import AnswerType, Question, SkillType
from exam_app.core.services.skill_classifier import SKILL_RULES, classify_question, classify_text


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Define momentum.", SkillType.THEORETICAL),
        ("WHAT IS an operating system?", SkillType.THEORETICAL),
        ("Explain why 2 + 2 = 4", SkillType.THEORETICAL),
        ("Solve for x: x + 3 = 7", SkillType.MATHEMATICAL),
        ("If a train leaves at 5, when does it arrive?", SkillType.MATHEMATICAL),
        ("Find the value of pi", SkillType.MATHEMATICAL),
        ("Which shape continues the sequence?", SkillType.LOGICAL),
        ("All cats are mammals; conclude the following.", SkillType.LOGICAL),
        ("How would you apply Newton's law here?", SkillType.PROBLEM_SOLVING),
        ("Given this scenario, choose the best action.", SkillType.PROBLEM_SOLVING),
        ("Name the capital of France.", SkillType.GENERAL),
    ],
)
def test_classify_text(text, expected):
    assert classify_text(text) is expected


def test_first_matching_rule_wins():
    # Contains a theoretical keyword, a digit and a logical keyword.
    assert classify_text("Explain the concept if 3 items follow a pattern") is SkillType.THEORETICAL
    # Digit beats the logical "if".
    assert classify_text("If 4 apples cost 8 coins, how much is one?") is SkillType.MATHEMATICAL


def test_rules_are_ordered_by_priority():
    assert [skill for _, skill in SKILL_RULES] == [
        SkillType.THEORETICAL,
        SkillType.MATHEMATICAL,
        SkillType.LOGICAL,
        SkillType.PROBLEM_SOLVING,
    ]


def test_custom_rules_can_be_supplied():
    rules = ((lambda text: "photosynthesis" in text, SkillType.THEORETICAL),)

    assert classify_text("Photosynthesis needs light", rules) is SkillType.THEORETICAL
    assert classify_text("Define it", rules) is SkillType.GENERAL


def test_classify_question_uses_question_text():
    question = Question(1, "Use the formula", ["A", "B"], AnswerType.SINGLE, 0, "Math")

    assert classify_question(question) is SkillType.MATHEMATICAL
