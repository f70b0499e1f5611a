"""Exam-related defaults shared across authoring, attempts and grading."""

DEFAULT_DURATION_SECONDS: int = 1800
DEFAULT_NEGATIVE_MARKING: float = 0.25
DEFAULT_POSITIVE_MARKS: float = 1.0
MIN_CHOICE_OPTIONS: int = 2
BOOLEAN_OPTIONS: tuple[str, str] = ("True", "False")

EXAM_KEY_LENGTH: int = 6
EXAM_KEY_ALPHABET: str = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
EXPIRY_SWEEP_INTERVAL_SECONDS: float = 5.0
