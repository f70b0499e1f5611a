"""Utilities for bulk-importing exam questions from pasted text.

Accepted layouts (blocks start at a numbered question line or a '---'
separator):

    Q1. Question text?
    a) Option 1
    b) Option 2
    c) Option 3
    d) Option 4
    Answer: a
    Category: Logical Reasoning

    2. Question text?
    A. Option 1
    B. Option 2
    Correct: B

    Question text?
    Option 1
    Option 2
    Ans: 2

Answers are a letter (a-d) or a 1-based option number; listing several
(`Answer: a, c`) makes a multiple-answer question. Blocks that do not yield
a question with at least two options are skipped.

Each parsed question is then "enhanced": its answer type, a category and a
difficulty are guessed from the wording.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import re

from exam_app.core.models import AnswerType, Question

logger = logging.getLogger(__name__)


class ExamImportError(Exception):
    """Raised when pasted text yields no importable questions."""


@dataclass(slots=True)
class ParsedQuestion:
    text: str
    options: list[str]
    correct: list[int] = field(default_factory=list)
    category: str | None = None


@dataclass(slots=True)
class QuestionEnhancement:
    answer_type: AnswerType
    suggested_category: str
    difficulty: str


_QUESTION_MARKER = re.compile(r"^(Q\d+\.|\d+\.)", re.IGNORECASE)
_QUESTION_PREFIX = re.compile(r"^Question:", re.IGNORECASE)
_OPTION_MARKER = re.compile(r"^([a-d]\)|\([a-d]\)|[a-d]\.)", re.IGNORECASE)
_ANSWER_MARKER = re.compile(r"^(Answer|Correct|Ans)\b:?", re.IGNORECASE)
_CATEGORY_MARKER = re.compile(r"^Category\b:?", re.IGNORECASE)
_ANSWER_LIST = re.compile(r"^\s*\(?((?:[a-d]|\d+)(?:\s*[,&/]\s*(?:[a-d]|\d+))*)\b", re.IGNORECASE)
_ANSWER_TOKEN = re.compile(r"[a-d]|\d+", re.IGNORECASE)

_MAX_BARE_OPTIONS = 4
_DEFAULT_CATEGORY = "General"

CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Logical Reasoning": ("logic", "sequence", "pattern", "series", "analogy"),
    "Numerical Ability": ("number", "calculate", "percentage", "ratio", "profit"),
    "Verbal Reasoning": ("synonym", "antonym", "word", "sentence", "grammar"),
    "Data Interpretation": ("data", "graph", "table", "chart", "statistics"),
    "General Knowledge": ("capital", "country", "who", "when", "where", "history"),
    "Technical": ("code", "algorithm", "program", "computer", "function"),
}

_MULTIPLE_HINTS = ("all of", "select all", "which of the following")


def import_questions(text: str, start_id: int = 1) -> list[Question]:
    """Parse pasted text into questions, raising when nothing usable is found."""
    parsed = parse_questions_text(text)
    if not parsed:
        raise ExamImportError("The text did not contain any usable questions.")
    return convert_to_questions(parsed, start_id)


def parse_questions_text(text: str) -> list[ParsedQuestion]:
    """Parse every recognizable question block in ``text``."""
    questions: list[ParsedQuestion] = []
    for block in _split_blocks(text):
        parsed = _parse_block(block)
        if parsed is None:
            logger.warning("Skipping unparseable question block: %.50s", block[0])
            continue
        questions.append(parsed)
    return questions


def _split_blocks(text: str) -> list[list[str]]:
    blocks: list[list[str]] = []
    current_block: list[str] = []
    for raw_line in text.replace("\r\n", "\n").replace("\r", "\n").splitlines():
        line = raw_line.strip()
        if line == "---":
            if current_block:
                blocks.append(current_block)
                current_block = []
            continue
        if not line:
            continue
        if _QUESTION_MARKER.match(line) and current_block:
            blocks.append(current_block)
            current_block = []
        current_block.append(line)
    if current_block:
        blocks.append(current_block)
    return blocks


def _parse_block(lines: list[str]) -> ParsedQuestion | None:
    if len(lines) < 3:
        return None

    question_text = ""
    options: list[str] = []
    correct: list[int] = []
    category: str | None = None

    for index, line in enumerate(lines):
        if not question_text and (index == 0 or _QUESTION_MARKER.match(line)):
            question_text = _QUESTION_MARKER.sub("", line, count=1)
            question_text = _QUESTION_PREFIX.sub("", question_text.strip(), count=1).strip()
            continue

        if _ANSWER_MARKER.match(line):
            correct = _parse_answer(_ANSWER_MARKER.sub("", line, count=1))
            continue

        if _CATEGORY_MARKER.match(line):
            category = _CATEGORY_MARKER.sub("", line, count=1).strip() or None
            continue

        if _OPTION_MARKER.match(line):
            option = _OPTION_MARKER.sub("", line, count=1).strip()
            if option:
                options.append(option)
            continue

        if question_text and len(options) < _MAX_BARE_OPTIONS:
            options.append(line)

    if not question_text or len(options) < 2:
        return None
    return ParsedQuestion(text=question_text, options=options, correct=correct, category=category)


def _parse_answer(raw_value: str) -> list[int]:
    """Read the leading answer list (`b`, `a, c`, `2`); trailing option text is ignored."""
    match = _ANSWER_LIST.match(raw_value)
    if match is None:
        return []
    indices: list[int] = []
    for token in _ANSWER_TOKEN.findall(match.group(1)):
        token = token.lower()
        index = int(token) - 1 if token.isdigit() else ord(token) - ord("a")
        if index not in indices:
            indices.append(index)
    return indices


def enhance_question(parsed: ParsedQuestion) -> QuestionEnhancement:
    """Guess answer type, category and difficulty from the question wording."""
    lowered = parsed.text.lower()

    answer_type = AnswerType.SINGLE
    if len(parsed.options) == 2 and ("true" in lowered or "false" in lowered):
        answer_type = AnswerType.BOOLEAN
    elif any(hint in lowered for hint in _MULTIPLE_HINTS):
        answer_type = AnswerType.MULTIPLE

    suggested_category = parsed.category or _DEFAULT_CATEGORY
    if parsed.category is None:
        best_matches = 0
        for category, keywords in CATEGORY_KEYWORDS.items():
            matches = sum(1 for keyword in keywords if keyword in lowered)
            if matches > best_matches:
                best_matches = matches
                suggested_category = category

    return QuestionEnhancement(
        answer_type=answer_type,
        suggested_category=suggested_category,
        difficulty=_estimate_difficulty(parsed),
    )


def _estimate_difficulty(parsed: ParsedQuestion) -> str:
    question_length = len(parsed.text)
    average_option_length = sum(len(option) for option in parsed.options) / len(parsed.options)
    if question_length < 50 and average_option_length < 20:
        return "easy"
    if question_length > 150 or average_option_length > 50:
        return "hard"
    return "medium"


def convert_to_questions(parsed_questions: list[ParsedQuestion], start_id: int = 1) -> list[Question]:
    questions: list[Question] = []
    for offset, parsed in enumerate(parsed_questions):
        enhancement = enhance_question(parsed)
        indices = [index for index in parsed.correct if 0 <= index < len(parsed.options)]
        if not indices:
            logger.warning(
                "Question %r has no usable answer; defaulting to the first option.",
                parsed.text[:50],
            )
            indices = [0]

        answer_type = enhancement.answer_type
        if len(indices) > 1:
            answer_type = AnswerType.MULTIPLE
        correct: int | frozenset[int] = indices[0]
        if answer_type is AnswerType.MULTIPLE:
            correct = frozenset(indices)
        questions.append(
            Question(
                id=start_id + offset,
                text=parsed.text,
                options=list(parsed.options),
                answer_type=answer_type,
                correct_answer=correct,
                category=enhancement.suggested_category,
                marks=1.0,
            )
        )
    return questions
