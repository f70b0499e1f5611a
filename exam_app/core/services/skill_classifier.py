"""Keyword heuristics that infer which skill a question exercises.

Rules are evaluated in order and the first match wins. Keyword sets overlap
("if" appears in many mathematical questions), so the order is part of the
behaviour: a question containing both a digit and "if" is mathematical.
Matching is plain substring search on the lowercased text.
"""

from __future__ import annotations

from collections.abc import Callable
import re

from exam_app.core.models import Question, SkillType

SkillRule = tuple[Callable[[str], bool], SkillType]

_DIGIT_PATTERN = re.compile(r"\d")

THEORETICAL_KEYWORDS: tuple[str, ...] = ("define", "what is", "explain", "theory", "concept")
MATHEMATICAL_KEYWORDS: tuple[str, ...] = (
    "calculate",
    "find the value",
    "solve",
    "equation",
    "formula",
)
LOGICAL_KEYWORDS: tuple[str, ...] = ("if", "then", "pattern", "sequence", "reasoning", "conclude")
PROBLEM_SOLVING_KEYWORDS: tuple[str, ...] = ("apply", "use", "scenario", "situation", "problem")


def _contains_any(keywords: tuple[str, ...]) -> Callable[[str], bool]:
    def predicate(text: str) -> bool:
        return any(keyword in text for keyword in keywords)

    return predicate


def _is_mathematical(text: str) -> bool:
    return bool(_DIGIT_PATTERN.search(text)) or _contains_any(MATHEMATICAL_KEYWORDS)(text)


SKILL_RULES: tuple[SkillRule, ...] = (
    (_contains_any(THEORETICAL_KEYWORDS), SkillType.THEORETICAL),
    (_is_mathematical, SkillType.MATHEMATICAL),
    (_contains_any(LOGICAL_KEYWORDS), SkillType.LOGICAL),
    (_contains_any(PROBLEM_SOLVING_KEYWORDS), SkillType.PROBLEM_SOLVING),
)


def classify_text(text: str, rules: tuple[SkillRule, ...] = SKILL_RULES) -> SkillType:
    lowered = text.lower()
    for predicate, skill in rules:
        if predicate(lowered):
            return skill
    return SkillType.GENERAL


def classify_question(question: Question) -> SkillType:
    return classify_text(question.text)
