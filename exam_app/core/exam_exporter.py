"""Utilities for exporting exam questions to the plain-text import format."""

from __future__ import annotations

from exam_app.core.models import AnswerType, Question

_OPTION_LETTERS = ("a", "b", "c", "d")


def serialize_questions(questions: list[Question]) -> str:
    """Render questions as blocks separated by '---' lines."""

    if not questions:
        raise ValueError("Cannot export an empty exam.")

    blocks = [_serialize_question(number, question) for number, question in enumerate(questions, start=1)]
    return "\n\n---\n\n".join(blocks) + "\n"


def _serialize_question(number: int, question: Question) -> str:
    if len(question.options) > len(_OPTION_LETTERS):
        raise ValueError("The text format supports at most four options per question.")

    # The format is line based, so multi-line prompts are folded onto one line.
    text = " ".join(line.strip() for line in question.text.splitlines() if line.strip())
    lines = [f"Q{number}. {text}"]
    for letter, option in zip(_OPTION_LETTERS, question.options):
        lines.append(f"{letter}) {option}")

    if question.answer_type is AnswerType.MULTIPLE:
        indices = sorted(question.correct_answer)
    else:
        indices = [question.correct_answer]
    lines.append("Answer: " + ", ".join(_OPTION_LETTERS[index] for index in indices))
    lines.append(f"Category: {question.category}")
    return "\n".join(lines)
