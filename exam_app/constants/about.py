"""Static metadata describing ExamInsight."""

APP_NAME = "ExamInsight"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "ExamInsight grades timed exams with per-question marks and negative marking, "
    "then turns the result into strengths, weaknesses, skill scores and a study plan."
)
